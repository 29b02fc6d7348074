import os
import tempfile
import unittest

import httpx

from gateway.upload import AssetUploader, UploadError


class AssetUploaderTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.image_path = os.path.join(self.temp_dir.name, "rose.png")
        with open(self.image_path, "wb") as f:
            f.write(b"\x89PNG fake image bytes")

        self.requests = []
        self.responder = lambda request: httpx.Response(
            200, json={"secure_url": "https://res.example/rose.png"}
        )

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return self.responder(request)

        self.uploader = AssetUploader("demo", "unsigned", transport=httpx.MockTransport(handler))

    def tearDown(self):
        self.temp_dir.cleanup()

    async def test_upload_returns_secure_url(self):
        url = await self.uploader.upload(self.image_path)
        self.assertEqual(url, "https://res.example/rose.png")

        request = self.requests[0]
        self.assertEqual(request.method, "POST")
        self.assertEqual(
            str(request.url), "https://api.cloudinary.com/v1_1/demo/image/upload"
        )
        self.assertTrue(request.headers["content-type"].startswith("multipart/form-data"))
        body = request.read()
        self.assertIn(b'name="upload_preset"', body)
        self.assertIn(b"unsigned", body)
        self.assertIn(b'filename="rose.png"', body)
        self.assertIn(b"fake image bytes", body)

    async def test_missing_file_makes_no_request(self):
        with self.assertRaises(UploadError):
            await self.uploader.upload(os.path.join(self.temp_dir.name, "nope.png"))
        self.assertEqual(self.requests, [])

    async def test_reply_without_secure_url_fails(self):
        self.responder = lambda request: httpx.Response(
            400, json={"error": {"message": "Upload preset not found"}}
        )
        with self.assertRaises(UploadError):
            await self.uploader.upload(self.image_path)

    async def test_non_json_reply_fails(self):
        self.responder = lambda request: httpx.Response(502, text="<html>bad gateway</html>")
        with self.assertRaises(UploadError):
            await self.uploader.upload(self.image_path)

    async def test_network_failure(self):
        def fail(request):
            raise httpx.ConnectError("offline", request=request)

        self.responder = fail
        with self.assertRaises(UploadError) as ctx:
            await self.uploader.upload(self.image_path)
        self.assertEqual(str(ctx.exception), "Upload failed")


if __name__ == "__main__":
    unittest.main()
