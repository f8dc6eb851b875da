import asyncio
import os
import types
import unittest
from unittest.mock import AsyncMock, patch, MagicMock
import asyncpg
import uservault_accounts as accounts


class TestDatabaseConfig(unittest.TestCase):
    def test_defaults(self):
        if any(key.startswith("USERVAULT_ACCOUNTS_DB_") for key in os.environ):
            self.skipTest("database settings present in the environment")

        cfg = accounts.DatabaseConfig()
        self.assertEqual(cfg.DB_USER, "__INVALID__")
        self.assertEqual(cfg.DB_PASSWORD, "__INVALID__")
        self.assertEqual(cfg.DB_NAME, "__INVALID__")
        self.assertEqual(cfg.DB_HOST, "127.0.0.1")
        self.assertEqual(cfg.DB_PORT, 5432)


class TestCancelBackgroundTasks(unittest.IsolatedAsyncioTestCase):
    async def test_no_task(self):
        if hasattr(accounts.app, "background_task"):
            delattr(accounts.app, "background_task")
        await accounts.cancel_background_tasks()

    async def test_with_task(self):
        task = asyncio.create_task(asyncio.sleep(10))
        accounts.app.background_task = task
        try:
            await accounts.cancel_background_tasks()
        finally:
            delattr(accounts.app, "background_task")
        self.assertTrue(task.cancelled())


class TestCreateDbPool(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.cfg = types.SimpleNamespace(DB_USER="u", DB_PASSWORD="p",
                                         DB_NAME="n", DB_HOST="h",
                                         DB_PORT=5432)

    @patch("uservault_accounts.asyncpg.create_pool", new_callable=AsyncMock)
    async def test_success(self, mock_create):
        mock_pool = AsyncMock()
        mock_create.return_value = mock_pool

        result = await accounts.create_db_pool(self.cfg)

        self.assertIs(result, mock_pool)
        mock_create.assert_awaited_once()
        self.assertEqual(mock_create.await_args.kwargs["database"], "n")

    @patch("uservault_accounts.cancel_background_tasks",
           new_callable=AsyncMock)
    @patch("uservault_accounts.os._exit")
    @patch("uservault_accounts.asyncio.sleep", new_callable=AsyncMock)
    async def test_fatal_errors_do_not_retry(self, mock_sleep, mock_exit,
                                             mock_cancel):
        for error in (asyncpg.InvalidPasswordError,
                      asyncpg.InvalidCatalogNameError):
            with self.subTest(error=error.__name__):
                mock_exit.reset_mock()
                mock_cancel.reset_mock()

                with patch("uservault_accounts.asyncpg.create_pool",
                           new_callable=AsyncMock,
                           side_effect=error("fatal")) as mock_create:
                    await accounts.create_db_pool(self.cfg, retries=3)

                mock_create.assert_awaited_once()
                mock_cancel.assert_awaited_once()
                mock_exit.assert_called_once_with(1)

        mock_sleep.assert_not_awaited()

    @patch("uservault_accounts.cancel_background_tasks",
           new_callable=AsyncMock)
    @patch("uservault_accounts.os._exit")
    @patch("uservault_accounts.asyncio.sleep", new_callable=AsyncMock)
    async def test_transient_errors_are_retried(self, mock_sleep, mock_exit,
                                                mock_cancel):
        for error in (asyncpg.CannotConnectNowError("starting"),
                      asyncio.TimeoutError(),
                      OSError("refused"),
                      asyncpg.PostgresError("fail")):
            with self.subTest(error=type(error).__name__):
                mock_sleep.reset_mock()
                mock_exit.reset_mock()

                with patch("uservault_accounts.asyncpg.create_pool",
                           new_callable=AsyncMock,
                           side_effect=error) as mock_create:
                    await accounts.create_db_pool(self.cfg, retries=3,
                                                  base_delay=0.01)

                self.assertEqual(mock_create.await_count, 3)
                self.assertEqual(mock_sleep.await_count, 2)
                mock_exit.assert_called_once_with(1)

    @patch("uservault_accounts.asyncio.sleep", new_callable=AsyncMock)
    async def test_recovers_after_transient_error(self, mock_sleep):
        mock_pool = AsyncMock()
        with patch("uservault_accounts.asyncpg.create_pool",
                   new_callable=AsyncMock,
                   side_effect=[OSError("refused"), mock_pool]):
            result = await accounts.create_db_pool(self.cfg)

        self.assertIs(result, mock_pool)
        mock_sleep.assert_awaited_once()

    @patch("uservault_accounts.cancel_background_tasks",
           new_callable=AsyncMock)
    @patch("uservault_accounts.os._exit")
    async def test_app_is_none_skips_cancel(self, mock_exit, mock_cancel):
        with patch("uservault_accounts.app", None), \
             patch("uservault_accounts.asyncpg.create_pool",
                   new_callable=AsyncMock, side_effect=OSError("fail")):
            await accounts.create_db_pool(self.cfg, retries=1)

        mock_cancel.assert_not_awaited()
        mock_exit.assert_called_once_with(1)


class TestRequestHooks(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.mock_pool = AsyncMock()
        self.mock_conn = AsyncMock()
        self.mock_pool.acquire.return_value = self.mock_conn
        self.original_pool = getattr(accounts.app, "db_pool", None)
        accounts.app.db_pool = self.mock_pool

    async def asyncTearDown(self):
        accounts.app.db_pool = self.original_pool

    async def test_acquire_connection_success(self):
        accounts.app.view_functions["endpoint"] = lambda: None
        dummy_request = types.SimpleNamespace(endpoint="endpoint")
        dummy_g = types.SimpleNamespace()

        with patch.object(accounts, "request", dummy_request), \
                patch.object(accounts, "g", dummy_g):
            result = await accounts.acquire_connection()

        self.assertIsNone(result)
        self.assertIs(dummy_g.db, self.mock_conn)
        self.mock_pool.acquire.assert_awaited_once_with(
            timeout=accounts.DB_ACQUIRE_TIMEOUT)

    async def test_acquire_connection_skip_no_db(self):
        async def handler():
            pass
        handler._no_db = True
        accounts.app.view_functions["x"] = handler

        dummy_request = types.SimpleNamespace(endpoint="x")
        dummy_g = types.SimpleNamespace()

        with patch.object(accounts, "request", dummy_request), \
                patch.object(accounts, "g", dummy_g):
            result = await accounts.acquire_connection()

        self.assertIsNone(result)
        self.mock_pool.acquire.assert_not_called()
        self.assertFalse(hasattr(dummy_g, "db"))

    async def test_acquire_connection_timeout(self):
        self.mock_pool.acquire.side_effect = asyncio.TimeoutError
        accounts.app.view_functions["endpoint"] = lambda: None

        dummy_request = types.SimpleNamespace(endpoint="endpoint")
        with patch.object(accounts, "request", dummy_request), \
                patch.object(accounts, "g", types.SimpleNamespace()):
            result = await accounts.acquire_connection()

        self.assertEqual(result, ({"error": "Service unavailable"}, 503))

    async def test_release_connection_with_db(self):
        dummy_g = types.SimpleNamespace(db=self.mock_conn)
        with patch.object(accounts, "g", dummy_g):
            resp = MagicMock()
            result = await accounts.release_connection(resp)

        self.mock_pool.release.assert_awaited_once_with(self.mock_conn)
        self.assertIsNone(dummy_g.db)
        self.assertIs(result, resp)

    async def test_release_connection_without_db(self):
        with patch.object(accounts, "g", types.SimpleNamespace()):
            resp = MagicMock()
            result = await accounts.release_connection(resp)

        self.assertIs(result, resp)
        self.mock_pool.release.assert_not_called()


class TestLifecycleHooks(unittest.IsolatedAsyncioTestCase):
    async def asyncTearDown(self):
        task = getattr(accounts.app, "background_task", None)
        if task is not None:
            await task
            delattr(accounts.app, "background_task")
        if hasattr(accounts.app, "db_pool"):
            delattr(accounts.app, "db_pool")

    @patch("uservault_accounts.SERVICE_APP")
    @patch("uservault_accounts.create_schema", new_callable=AsyncMock)
    @patch("uservault_accounts.create_db_pool", new_callable=AsyncMock)
    async def test_startup_success(self, mock_dbpool, mock_create_schema,
                                   mock_service_app):
        mock_service_app.initialise = AsyncMock(return_value=True)
        mock_service_app.run = AsyncMock()
        mock_service_app.create_schema_on_startup = False

        await accounts.startup()

        mock_dbpool.assert_awaited_once_with(accounts.DatabaseConfig)
        mock_create_schema.assert_not_awaited()
        mock_service_app.run.assert_called_once()

    @patch("uservault_accounts.SERVICE_APP")
    @patch("uservault_accounts.create_schema", new_callable=AsyncMock)
    @patch("uservault_accounts.create_db_pool", new_callable=AsyncMock)
    async def test_startup_creates_schema_when_configured(
            self, mock_dbpool, mock_create_schema, mock_service_app):
        mock_service_app.initialise = AsyncMock(return_value=True)
        mock_service_app.run = AsyncMock()
        mock_service_app.create_schema_on_startup = True

        await accounts.startup()

        mock_create_schema.assert_awaited_once_with(
            mock_dbpool.return_value, mock_service_app.logger)

    @patch("uservault_accounts.SERVICE_APP")
    @patch("uservault_accounts.os._exit")
    @patch("uservault_accounts.create_schema", new_callable=AsyncMock,
           side_effect=OSError("connection lost"))
    @patch("uservault_accounts.create_db_pool", new_callable=AsyncMock)
    async def test_startup_schema_failure_exits(self, mock_dbpool,
                                                mock_create_schema,
                                                mock_exit, mock_service_app):
        mock_service_app.initialise = AsyncMock(return_value=True)
        mock_service_app.run = AsyncMock()
        mock_service_app.create_schema_on_startup = True

        with patch("builtins.print"):
            await accounts.startup()

        mock_exit.assert_called_once_with(1)

    @patch("uservault_accounts.SERVICE_APP")
    @patch("uservault_accounts.create_db_pool", new_callable=AsyncMock)
    @patch("uservault_accounts.os._exit")
    async def test_startup_failure(self, mock_exit, mock_dbpool,
                                   mock_service_app):
        mock_service_app.initialise = AsyncMock(return_value=False)
        mock_service_app.run = AsyncMock()
        mock_service_app.create_schema_on_startup = False

        await accounts.startup()

        mock_exit.assert_any_call(1)

    @patch("uservault_accounts.SERVICE_APP")
    @patch("uservault_accounts.cancel_background_tasks",
           new_callable=AsyncMock)
    async def test_shutdown(self, mock_cancel, mock_service_app):
        fake_pool = AsyncMock()
        accounts.app.db_pool = fake_pool

        await accounts.shutdown()

        mock_service_app.shutdown_event.set.assert_called_once()
        mock_cancel.assert_awaited_once()
        fake_pool.close.assert_awaited_once()

    @patch("uservault_accounts.SERVICE_APP")
    @patch("uservault_accounts.cancel_background_tasks",
           new_callable=AsyncMock)
    async def test_shutdown_app_is_none_logs_warning(self, mock_cancel,
                                                     mock_service_app):
        with patch("uservault_accounts.app", None), \
                patch("builtins.print") as mock_print:
            await accounts.shutdown()

        mock_print.assert_called_with(
            "[WARN] app is None on shutdown, skipping cleanup", flush=True)
        mock_service_app.shutdown_event.set.assert_called_once()
        mock_cancel.assert_not_awaited()
