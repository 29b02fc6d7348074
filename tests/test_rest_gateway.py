import json
import unittest

import httpx

from controllers.base import LoadState
from controllers.products import ProductsController
from gateway.base import AuthError, GatewayError, OrderBy, eq, in_
from gateway.models import Identity
from gateway.rest import RestGateway

BASE_URL = "https://project.example.co"


class RestGatewayTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.requests = []
        self.responder = lambda request: httpx.Response(200, json=[])

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return self.responder(request)

        self.gw = RestGateway(BASE_URL, "anon-key", transport=httpx.MockTransport(handler))

    async def asyncTearDown(self):
        await self.gw.aclose()

    async def sign_in(self):
        self.responder = lambda request: httpx.Response(
            200,
            json={"access_token": "tok", "user": {"id": "u1", "email": "a@b.c"}},
        )
        await self.gw.sign_in("a@b.c", "pw")
        self.requests.clear()

    # ---------- Queries ----------

    async def test_select_builds_postgrest_query(self):
        self.responder = lambda request: httpx.Response(200, json=[{"id": "1"}])
        rows = await self.gw.select(
            "orders", "id, status", [eq("status", "pending")], OrderBy("created_at")
        )
        self.assertEqual(rows, [{"id": "1"}])

        request = self.requests[0]
        self.assertEqual(request.method, "GET")
        self.assertEqual(request.url.path, "/rest/v1/orders")
        self.assertEqual(request.url.params["select"], "id,status")
        self.assertEqual(request.url.params["status"], "eq.pending")
        self.assertEqual(request.url.params["order"], "created_at.desc")
        self.assertEqual(request.headers["apikey"], "anon-key")
        self.assertEqual(request.headers["authorization"], "Bearer anon-key")

    async def test_in_filter_encoding(self):
        await self.gw.select("profiles", "id", [in_("id", ["a", "b"])])
        self.assertEqual(self.requests[0].url.params["id"], 'in.("a","b")')

    async def test_filters_on_one_column_are_all_sent(self):
        await self.gw.select("orders", "id", [eq("status", "pending"), in_("status", ["a"])])
        self.assertEqual(
            self.requests[0].url.params.get_list("status"), ["eq.pending", 'in.("a")']
        )

        self.responder = lambda request: httpx.Response(200, headers={"Content-Range": "*/0"})
        await self.gw.select_count("orders", [eq("user_id", "u1"), eq("user_id", "u2")])
        self.assertEqual(
            self.requests[1].url.params.get_list("user_id"), ["eq.u1", "eq.u2"]
        )

    async def test_non_json_reply_becomes_gateway_error(self):
        self.responder = lambda request: httpx.Response(200, text="<html>maintenance</html>")
        with self.assertRaises(GatewayError):
            await self.gw.select("products")
        with self.assertRaises(GatewayError):
            await self.gw.insert("products", {"name": "Soap"})

    async def test_products_load_survives_non_json_reply(self):
        self.responder = lambda request: httpx.Response(200, text="<html>maintenance</html>")
        ctrl = ProductsController(self.gw)
        self.assertFalse(await ctrl.load())
        self.assertFalse(ctrl.products.loading)
        self.assertIs(ctrl.products.state, LoadState.ERROR)
        self.assertIsNotNone(ctrl.products.error)

    async def test_select_count_reads_content_range(self):
        self.responder = lambda request: httpx.Response(
            200, headers={"Content-Range": "0-24/573"}
        )
        self.assertEqual(await self.gw.select_count("products"), 573)
        request = self.requests[0]
        self.assertEqual(request.method, "HEAD")
        self.assertEqual(request.headers["prefer"], "count=exact")

        self.responder = lambda request: httpx.Response(200, headers={"Content-Range": "*/0"})
        self.assertEqual(await self.gw.select_count("products"), 0)

    async def test_select_count_without_range_fails(self):
        self.responder = lambda request: httpx.Response(200)
        with self.assertRaises(GatewayError):
            await self.gw.select_count("products")

    # ---------- Commands ----------

    async def test_insert_returns_stored_row(self):
        self.responder = lambda request: httpx.Response(
            201, json=[{"id": "new", "name": "Soap"}]
        )
        stored = await self.gw.insert("products", {"name": "Soap"})
        self.assertEqual(stored, {"id": "new", "name": "Soap"})

        request = self.requests[0]
        self.assertEqual(request.method, "POST")
        self.assertEqual(json.loads(request.content), [{"name": "Soap"}])
        self.assertEqual(request.headers["prefer"], "return=representation")

    async def test_update_and_delete_send_filters(self):
        self.responder = lambda request: httpx.Response(204)
        await self.gw.update("orders", {"status": "shipped"}, [eq("id", "o1")])
        await self.gw.delete("products", [eq("id", "p1")])

        patch, delete = self.requests
        self.assertEqual(patch.method, "PATCH")
        self.assertEqual(patch.url.params["id"], "eq.o1")
        self.assertEqual(json.loads(patch.content), {"status": "shipped"})
        self.assertEqual(delete.method, "DELETE")
        self.assertEqual(delete.url.path, "/rest/v1/products")

    async def test_error_body_becomes_gateway_error(self):
        self.responder = lambda request: httpx.Response(
            400, json={"message": "permission denied for table products"}
        )
        with self.assertRaises(GatewayError) as ctx:
            await self.gw.delete("products", [eq("id", "p1")])
        self.assertEqual(ctx.exception.message, "permission denied for table products")

    async def test_network_failure_becomes_gateway_error(self):
        def fail(request):
            raise httpx.ConnectError("connection refused", request=request)

        self.responder = fail
        with self.assertRaises(GatewayError) as ctx:
            await self.gw.select("products")
        self.assertTrue(ctx.exception.message.startswith("Network error"))

    # ---------- Auth ----------

    async def test_sign_in_uses_token_afterwards(self):
        await self.sign_in()
        await self.gw.select("products")
        self.assertEqual(self.requests[0].headers["authorization"], "Bearer tok")

    async def test_sign_in_rejected(self):
        self.responder = lambda request: httpx.Response(
            400, json={"error_description": "Invalid login credentials"}
        )
        with self.assertRaises(AuthError) as ctx:
            await self.gw.sign_in("a@b.c", "bad")
        self.assertEqual(ctx.exception.message, "Invalid login credentials")
        self.assertEqual(self.requests[0].url.params["grant_type"], "password")

    async def test_sign_in_server_error_is_not_auth_error(self):
        self.responder = lambda request: httpx.Response(500, text="boom")
        with self.assertRaises(GatewayError) as ctx:
            await self.gw.sign_in("a@b.c", "pw")
        self.assertNotIsInstance(ctx.exception, AuthError)

    async def test_sign_in_non_json_reply(self):
        self.responder = lambda request: httpx.Response(200, text="<html>maintenance</html>")
        with self.assertRaises(GatewayError) as ctx:
            await self.gw.sign_in("a@b.c", "pw")
        self.assertNotIsInstance(ctx.exception, AuthError)

    async def test_current_identity_with_bad_body(self):
        await self.sign_in()
        for reply in (
            httpx.Response(200, text="<html>maintenance</html>"),
            httpx.Response(200, json={"email": "a@b.c"}),
            httpx.Response(200, json=["u1"]),
        ):
            with self.subTest(body=reply.text):
                self.responder = lambda request, reply=reply: reply
                with self.assertRaises(GatewayError):
                    await self.gw.get_current_identity()

    async def test_current_identity(self):
        self.assertIsNone(await self.gw.get_current_identity())
        self.assertEqual(self.requests, [])

        await self.sign_in()
        self.responder = lambda request: httpx.Response(200, json={"id": "u1", "email": "a@b.c"})
        self.assertEqual(await self.gw.get_current_identity(), Identity("u1", "a@b.c"))

        # an expired token means nobody is signed in
        self.responder = lambda request: httpx.Response(401, json={"msg": "expired"})
        self.assertIsNone(await self.gw.get_current_identity())
        self.assertIsNone(await self.gw.get_current_identity())

    async def test_sign_out_forgets_token_even_on_failure(self):
        await self.sign_in()

        def fail(request):
            raise httpx.ConnectError("down", request=request)

        self.responder = fail
        await self.gw.sign_out()
        self.assertEqual(self.requests[0].url.path, "/auth/v1/logout")
        self.assertIsNone(await self.gw.get_current_identity())


if __name__ == "__main__":
    unittest.main()
