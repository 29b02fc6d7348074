from __future__ import annotations

import math
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import gateway.crud as crud
from controllers.base import Confirm, RemoteCollection
from gateway.base import DataGateway, GatewayError
from gateway.models import Product
from gateway.upload import AssetUploader, UploadError
from utils.logger import get_logger
from utils.pure import category_options, distinct_categories, filter_by_category

_logger = get_logger(__name__)

MSG_UPLOADING = "Uploading image..."
MSG_UPLOADED = "Image uploaded successfully!"
MSG_UPLOAD_FAILED = "Failed to upload image."
MSG_NEED_IMAGE = "Please upload an image first."
MSG_ADDED = "Product added successfully!"
MSG_ADD_FAILED = "Failed to add product. Try again."
MSG_UPDATE_FAILED = "Update failed!"
MSG_DELETE_FAILED = "Delete failed!"


class ValidationError(ValueError):
    """A required field is empty or a number does not parse."""


@dataclass
class ProductForm:
    """
    Raw text of the product form, exactly as typed.
    """

    name: str = ""
    price: str = ""
    category: str = ""
    description: str = ""
    image_url: str = ""
    stock: str = ""

    @classmethod
    def from_product(cls, product: Product) -> "ProductForm":
        return cls(
            name=product.name,
            price=f"{product.price:g}",
            category=product.category,
            description=product.description,
            image_url=product.image_url,
            stock=str(product.stock),
        )

    def clear(self) -> None:
        for f in fields(self):
            setattr(self, f.name, "")

    def to_row(self) -> Dict[str, Any]:
        """
        Parse into a product row. Price becomes a float, stock an int.
        Raises ValidationError on missing or malformed values.
        """
        for label, value in (
            ("Product name", self.name),
            ("Price", self.price),
            ("Category", self.category),
            ("Stock", self.stock),
        ):
            if not value.strip():
                raise ValidationError(f"{label} is required.")

        try:
            price = float(self.price.strip())
        except ValueError:
            price = math.nan
        if not math.isfinite(price):
            raise ValidationError("Price must be a number.")
        try:
            stock = int(self.stock.strip())
        except ValueError:
            raise ValidationError("Stock must be a whole number.") from None
        if price < 0:
            raise ValidationError("Price cannot be negative.")
        if stock < 0:
            raise ValidationError("Stock cannot be negative.")

        return {
            "name": self.name.strip(),
            "price": price,
            "category": self.category.strip(),
            "description": self.description.strip(),
            "image_url": self.image_url,
            "stock": stock,
        }


class ImageSlot:
    """
    The image field of one form. A finished upload writes the URL into the
    form; a failed one leaves the previous URL alone.
    """

    def __init__(self, uploader: AssetUploader, form: ProductForm) -> None:
        self.uploader = uploader
        self.form = form
        self.uploading = False
        self.message: Optional[str] = None

    async def upload(self, path: Union[str, Path]) -> bool:
        self.uploading = True
        self.message = MSG_UPLOADING
        try:
            url = await self.uploader.upload(path)
        except UploadError as exc:
            _logger.error(f"Image upload failed: {exc}")
            self.message = MSG_UPLOAD_FAILED
            return False
        finally:
            self.uploading = False

        self.form.image_url = url
        self.message = MSG_UPLOADED
        return True


class AddProductController:
    def __init__(self, gw: DataGateway, uploader: AssetUploader) -> None:
        self.gw = gw
        self.form = ProductForm()
        self.image = ImageSlot(uploader, self.form)
        self.submitting = False
        self.message: Optional[str] = None
        self.succeeded = False

    @property
    def can_submit(self) -> bool:
        return not (self.submitting or self.image.uploading)

    async def upload_image(self, path: Union[str, Path]) -> bool:
        ok = await self.image.upload(path)
        self.message = self.image.message
        self.succeeded = ok
        return ok

    async def submit(self) -> Optional[Product]:
        """
        Create the product. Returns it on success; on any failure the form
        keeps its contents and `message` explains why.
        """
        self.succeeded = False
        if not self.can_submit:
            return None
        if not self.form.image_url:
            self.message = MSG_NEED_IMAGE
            return None
        try:
            row = self.form.to_row()
        except ValidationError as exc:
            self.message = str(exc)
            return None

        self.submitting = True
        self.message = None
        try:
            product = await crud.add_product(self.gw, row)
        except GatewayError as exc:
            _logger.error(f"Adding product failed: {exc.message}")
            self.message = MSG_ADD_FAILED
            return None
        finally:
            self.submitting = False

        _logger.info(f"Product {product.id} added")
        self.form.clear()
        self.message = MSG_ADDED
        self.succeeded = True
        return product


class ProductsController:
    """
    Manage-Products screen: list, category filter, edit, delete.
    """

    def __init__(self, gw: DataGateway) -> None:
        self.gw = gw
        self.products: RemoteCollection[Product] = RemoteCollection(
            lambda: crud.list_products(gw), name="products"
        )
        self.selected_category: Optional[str] = None
        self.message: Optional[str] = None

    @property
    def categories(self) -> List[str]:
        return distinct_categories(p.category for p in self.products.items)

    @property
    def category_options(self) -> List[Tuple[str, Optional[str]]]:
        return category_options(p.category for p in self.products.items)

    @property
    def visible(self) -> List[Product]:
        return filter_by_category(self.products.items, self.selected_category)

    def select_category(self, category: Optional[str]) -> None:
        """None shows every category. Unknown categories fall back to None."""
        if category not in self.categories:
            category = None
        self.selected_category = category

    async def load(self) -> bool:
        ok = await self.products.load()
        if ok and self.selected_category not in self.categories:
            self.selected_category = None
        return ok

    async def update_product(self, product_id: str, form: ProductForm) -> bool:
        try:
            patch = form.to_row()
        except ValidationError as exc:
            self.message = str(exc)
            return False

        ok = await self.products.mutate(
            product_id, lambda: crud.update_product(self.gw, product_id, patch)
        )
        if not ok:
            self.message = MSG_UPDATE_FAILED
            return False
        self.message = None
        await self.load()
        return True

    async def delete_product(self, product_id: str, confirm: Confirm) -> bool:
        """
        Ask first; only a confirmed delete reaches the gateway. No undo.
        """
        if not await confirm("Are you sure you want to delete this product?"):
            return False

        ok = await self.products.mutate(
            product_id, lambda: crud.delete_product(self.gw, product_id)
        )
        if not ok:
            self.message = MSG_DELETE_FAILED
            return False
        self.message = None
        await self.load()
        return True

    def close(self) -> None:
        self.products.close()
