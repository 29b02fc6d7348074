import unittest

from controllers.guard import (
    MSG_ADMINS_ONLY,
    MSG_INVALID_CREDENTIALS,
    MSG_ROLE_UNVERIFIED,
    MSG_UNEXPECTED,
    Access,
    admin_sign_in,
    check_admin_access,
)
from fakes import RecordingGateway, network_down
from gateway.base import AuthError
from gateway.upload import AssetUploader
from utils.state import GlobalState


def make_state(profiles):
    gw = RecordingGateway({"profiles": profiles})
    state = GlobalState(gateway=gw, uploader=AssetUploader("demo", "preset"))
    return gw, state


class CheckAdminAccessTestCase(unittest.IsolatedAsyncioTestCase):
    async def test_nobody_signed_in_goes_to_login(self):
        gw, state = make_state([])
        self.assertIs(await check_admin_access(state), Access.LOGIN)
        # no role lookup without an identity
        self.assertEqual(gw.calls_to("select"), [])

    async def test_admin_is_granted(self):
        gw, state = make_state([{"id": "u1", "role": "admin"}])
        gw.identity = gw.add_account("a@x.io", "pw", "u1")
        self.assertIs(await check_admin_access(state), Access.GRANTED)
        self.assertTrue(state.is_admin)

    async def test_every_other_role_goes_to_landing(self):
        for role in ("customer", "staff", "", "Admin", None):
            with self.subTest(role=role):
                gw, state = make_state([{"id": "u1", "role": role}])
                gw.identity = gw.add_account("a@x.io", "pw", "u1")
                self.assertIs(await check_admin_access(state), Access.LANDING)
                self.assertFalse(state.is_admin)

    async def test_missing_profile_goes_to_landing(self):
        gw, state = make_state([])
        gw.identity = gw.add_account("a@x.io", "pw", "u1")
        self.assertIs(await check_admin_access(state), Access.LANDING)

    async def test_failed_role_lookup_denies(self):
        gw, state = make_state([{"id": "u1", "role": "admin"}])
        gw.identity = gw.add_account("a@x.io", "pw", "u1")
        gw.fail["select"] = network_down()
        self.assertIs(await check_admin_access(state), Access.LANDING)
        # exactly one attempt
        self.assertEqual(len(gw.calls_to("select")), 1)

    async def test_failed_identity_read_goes_to_login(self):
        gw, state = make_state([])
        gw.fail["get_current_identity"] = network_down()
        self.assertIs(await check_admin_access(state), Access.LOGIN)

    async def test_role_is_reread_after_identity_changes(self):
        gw, state = make_state(
            [{"id": "u1", "role": "admin"}, {"id": "u2", "role": "customer"}]
        )
        gw.identity = gw.add_account("a@x.io", "pw", "u1")
        self.assertIs(await check_admin_access(state), Access.GRANTED)

        gw.identity = gw.add_account("b@x.io", "pw", "u2")
        self.assertIs(await check_admin_access(state), Access.LANDING)


class AdminSignInTestCase(unittest.IsolatedAsyncioTestCase):
    async def test_admin_signs_in(self):
        gw, state = make_state([{"id": "u1", "role": "admin"}])
        gw.add_account("a@x.io", "pw", "u1")
        self.assertIsNone(await admin_sign_in(state, "a@x.io", "pw"))
        self.assertEqual(state.identity.email, "a@x.io")
        self.assertEqual(state.role, "admin")

    async def test_bad_credentials_show_backend_message(self):
        gw, state = make_state([])
        gw.add_account("a@x.io", "pw", "u1")
        self.assertEqual(
            await admin_sign_in(state, "a@x.io", "nope"), "Invalid login credentials"
        )
        self.assertIsNone(state.identity)

    async def test_empty_auth_message_falls_back(self):
        gw, state = make_state([])
        gw.fail["sign_in"] = AuthError("")
        self.assertEqual(await admin_sign_in(state, "a@x.io", "pw"), MSG_INVALID_CREDENTIALS)

    async def test_non_admin_is_signed_out(self):
        gw, state = make_state([{"id": "u1", "role": "customer"}])
        gw.add_account("a@x.io", "pw", "u1")
        self.assertEqual(await admin_sign_in(state, "a@x.io", "pw"), MSG_ADMINS_ONLY)
        self.assertIsNone(state.identity)
        self.assertIsNone(gw.identity)
        self.assertEqual(len(gw.calls_to("sign_out")), 1)

    async def test_missing_profile_cannot_be_verified(self):
        gw, state = make_state([])
        gw.add_account("a@x.io", "pw", "u1")
        self.assertEqual(await admin_sign_in(state, "a@x.io", "pw"), MSG_ROLE_UNVERIFIED)
        self.assertIsNone(gw.identity)

    async def test_role_lookup_failure(self):
        gw, state = make_state([{"id": "u1", "role": "admin"}])
        gw.add_account("a@x.io", "pw", "u1")
        gw.fail["select"] = network_down()
        self.assertEqual(await admin_sign_in(state, "a@x.io", "pw"), MSG_ROLE_UNVERIFIED)
        self.assertIsNone(state.identity)

    async def test_unreachable_backend(self):
        gw, state = make_state([])
        gw.fail["sign_in"] = network_down()
        self.assertEqual(await admin_sign_in(state, "a@x.io", "pw"), MSG_UNEXPECTED)


if __name__ == "__main__":
    unittest.main()
