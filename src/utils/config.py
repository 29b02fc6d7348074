from __future__ import annotations

import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel

from gateway.base import DataGateway
from gateway.rest import RestGateway
from gateway.sqlite import SqliteGateway
from gateway.upload import AssetUploader


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


class Settings(BaseModel):
    """
    Environment-driven configuration, read once at start-up.
    """

    backend: Literal["sqlite", "rest"] = "sqlite"
    db_path: str = "data/admin.sqlite"
    seed_demo_data: bool = True

    supabase_url: str = ""
    supabase_anon_key: str = ""

    cloudinary_cloud_name: str = ""
    cloudinary_upload_preset: str = ""

    storefront_url: str = "https://brand-sigma-jade.vercel.app/"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            backend=_env("ADMIN_BACKEND", "sqlite").lower() or "sqlite",
            db_path=_env("ADMIN_DB_PATH", "data/admin.sqlite"),
            seed_demo_data=_env("ADMIN_SEED_DEMO", "1").lower() not in {"0", "false"},
            supabase_url=_env("SUPABASE_URL"),
            supabase_anon_key=_env("SUPABASE_ANON_KEY"),
            cloudinary_cloud_name=_env("CLOUDINARY_CLOUD_NAME"),
            cloudinary_upload_preset=_env("CLOUDINARY_UPLOAD_PRESET"),
            storefront_url=_env("STOREFRONT_URL", cls.model_fields["storefront_url"].default),
        )


def build_gateway(settings: Settings) -> DataGateway:
    if settings.backend == "rest":
        if not settings.supabase_url or not settings.supabase_anon_key:
            raise ValueError(
                "ADMIN_BACKEND=rest needs SUPABASE_URL and SUPABASE_ANON_KEY"
            )
        return RestGateway(settings.supabase_url, settings.supabase_anon_key)
    return SqliteGateway(settings.db_path, seed=settings.seed_demo_data)


def build_uploader(settings: Settings) -> AssetUploader:
    return AssetUploader(
        settings.cloudinary_cloud_name, settings.cloudinary_upload_preset
    )
