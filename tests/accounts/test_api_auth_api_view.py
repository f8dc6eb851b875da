from http import HTTPStatus
import json
import logging
import unittest
from unittest.mock import AsyncMock, MagicMock, patch
from quart import Quart, Response
from uservault_accounts.api.auth_api import create_blueprint
from uservault_accounts.api.auth_api_view import AuthApiView
from view_test_case import AccountViewTestCase


class TestCreateBlueprint(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.logger = logging.getLogger("test_logger")
        self.logger.setLevel(logging.DEBUG)
        self.logger.addHandler(logging.NullHandler())
        self.state_object = MagicMock()
        self.credential_manager = MagicMock()

    @patch("uservault_accounts.api.auth_api.AuthApiView")
    async def test_create_user_route_calls_view(self, mock_auth_view_cls):
        mock_view_instance = MagicMock()
        mock_view_instance.create_user = AsyncMock(
            return_value=Response(json.dumps({"status": "ok"}),
                                  mimetype="application/json"))
        mock_auth_view_cls.return_value = mock_view_instance

        app = Quart(__name__)
        app.register_blueprint(create_blueprint(self.logger,
                                                self.state_object,
                                                self.credential_manager),
                               url_prefix="/auth")

        response = await app.test_client().post("/auth/create_user")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(await response.get_json(), {"status": "ok"})
        mock_auth_view_cls.assert_called_once_with(self.logger,
                                                   self.state_object,
                                                   self.credential_manager)
        mock_view_instance.create_user.assert_awaited_once()

    @patch("uservault_accounts.api.auth_api.AuthApiView")
    async def test_logging_occurs(self, mock_auth_view_cls):
        mock_auth_view_cls.return_value = MagicMock()

        log_stream = []

        class ListHandler(logging.Handler):
            def emit(self, record):
                log_stream.append(record.getMessage())

        handler = ListHandler()
        self.logger.addHandler(handler)

        try:
            create_blueprint(self.logger, self.state_object,
                             self.credential_manager)
        finally:
            self.logger.removeHandler(handler)

        self.assertIn("Registering Auth API routes:", log_stream)
        self.assertIn("=> /auth/create_user [POST]", log_stream)
        self.assertIn("=> /auth/login_email [POST]", log_stream)


class TestCreateUser(AccountViewTestCase):
    view_class = AuthApiView

    async def test_created_user_is_returned_pending(self):
        body, status = await self.call(
            "create_user", "/auth/create_user",
            json={"email": "jane@example.com", "full_name": "jane doe",
                  "password": "secret123"})

        self.assertEqual(status, HTTPStatus.CREATED)
        user = body["user"]
        self.assertEqual(user["full_name"], "Jane Doe")
        self.assertEqual(user["slug"], "jane-doe")
        self.assertEqual(user["role"], "unconfirmed")
        self.assertFalse(user["is_verified"])
        self.assertNotIn("pass_hash", user)
        self.assertNotIn("password", user)

    async def test_duplicate_email_names_the_field(self):
        await self.create_user()

        body, status = await self.call(
            "create_user", "/auth/create_user",
            json={"email": "jane@example.com", "full_name": "Other Person",
                  "password": "secret123"})

        self.assertEqual(status, HTTPStatus.CONFLICT)
        self.assertEqual(body["field"], "email")

    async def test_short_password_is_rejected_without_echoing_it(self):
        body, status = await self.call(
            "create_user", "/auth/create_user",
            json={"email": "jane@example.com", "full_name": "Jane Doe",
                  "password": "short"})

        self.assertEqual(status, HTTPStatus.BAD_REQUEST)
        self.assertIn("password", body["error"])
        self.assertNotIn("short", body["error"])
        self.assertEqual(self.store.users, {})

    async def test_password_with_nul_byte_is_bad_request(self):
        body, status = await self.call(
            "create_user", "/auth/create_user",
            json={"email": "jane@example.com", "full_name": "Jane Doe",
                  "password": "secret\x00123"})

        self.assertEqual(status, HTTPStatus.BAD_REQUEST)
        self.assertEqual(body,
                         {"error": "password contains characters that are "
                                   "not allowed"})
        self.assertEqual(self.store.users, {})

    async def test_password_over_72_utf8_bytes_is_rejected(self):
        # 40 characters, 80 bytes.
        body, status = await self.call(
            "create_user", "/auth/create_user",
            json={"email": "jane@example.com", "full_name": "Jane Doe",
                  "password": "\u00e9" * 40})

        self.assertEqual(status, HTTPStatus.BAD_REQUEST)
        self.assertIn("72 bytes", body["error"])
        self.assertEqual(self.store.users, {})

    async def test_invalid_email_is_rejected(self):
        _, status = await self.call(
            "create_user", "/auth/create_user",
            json={"email": "not-an-email", "full_name": "Jane Doe",
                  "password": "secret123"})

        self.assertEqual(status, HTTPStatus.BAD_REQUEST)

    async def test_missing_body_is_rejected(self):
        body, status = await self.call("create_user", "/auth/create_user")

        self.assertEqual(status, HTTPStatus.BAD_REQUEST)
        self.assertEqual(body, {"error": "Invalid or missing JSON body"})


class TestLoginEmail(AccountViewTestCase):
    view_class = AuthApiView

    async def test_login_returns_profile(self):
        created = await self.create_user()

        body, status = await self.call(
            "login_email", "/auth/login_email",
            json={"email": "jane@example.com", "password": "secret123"})

        self.assertEqual(status, HTTPStatus.OK)
        self.assertEqual(body["user"]["id"], created.id)
        self.assertIsNotNone(body["user"]["last_login_at"])

    async def test_wrong_password_is_bad_request(self):
        await self.create_user()

        body, status = await self.call(
            "login_email", "/auth/login_email",
            json={"email": "jane@example.com", "password": "wrong-pass"})

        self.assertEqual(status, HTTPStatus.BAD_REQUEST)
        self.assertEqual(body, {"error": "invalid password"})

    async def test_unknown_email_is_not_found(self):
        _, status = await self.call(
            "login_email", "/auth/login_email",
            json={"email": "nobody@example.com", "password": "secret123"})

        self.assertEqual(status, HTTPStatus.NOT_FOUND)
