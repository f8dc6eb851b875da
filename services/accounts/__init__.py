"""
Copyright (C) 2025  UserVault Development Team
SPDX-License-Identifier: AGPL-3.0-or-later

This file is part of UserVault. See the LICENSE file in the project
root for full license details.
"""
import asyncio
import os
import random
from quart import g, Quart, request
import asyncpg
from uservault_common.route_decorators import is_route_not_using_db
from uservault_accounts.application import Application
from uservault_accounts.database import create_schema

# Quart application instance
app = Quart(__name__)

SERVICE_APP: Application = Application(app)

# Seconds a request waits for a pooled connection before answering 503.
DB_ACQUIRE_TIMEOUT = 2.0


class DatabaseConfig:
    """
    Connection settings of the accounts database, read from the
    environment.

    Attributes:
        DB_USER (str): ``USERVAULT_ACCOUNTS_DB_USER``, defaults to
            "__INVALID__".
        DB_PASSWORD (str): ``USERVAULT_ACCOUNTS_DB_PASSWORD``, defaults to
            "__INVALID__".
        DB_NAME (str): ``USERVAULT_ACCOUNTS_DB_NAME``, defaults to
            "__INVALID__".
        DB_HOST (str): ``USERVAULT_ACCOUNTS_DB_HOST``, defaults to
            "127.0.0.1".
        DB_PORT (int): ``USERVAULT_ACCOUNTS_DB_PORT``, defaults to 5432.
    """
    # pylint: disable=too-few-public-methods
    DB_USER = os.getenv("USERVAULT_ACCOUNTS_DB_USER", "__INVALID__")
    DB_PASSWORD = os.getenv("USERVAULT_ACCOUNTS_DB_PASSWORD", "__INVALID__")
    DB_NAME = os.getenv("USERVAULT_ACCOUNTS_DB_NAME", "__INVALID__")
    DB_HOST = os.getenv("USERVAULT_ACCOUNTS_DB_HOST", "127.0.0.1")
    DB_PORT = int(os.getenv("USERVAULT_ACCOUNTS_DB_PORT", "5432"))


async def cancel_background_tasks():
    """
    Cancel and await the background task stored on ``app``, if any.

    The ``asyncio.CancelledError`` raised by the cancelled task is
    suppressed.
    """
    task = getattr(app, "background_task", None)
    if task:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass


@app.before_serving
async def startup() -> None:
    """
    Initialise the service, connect to the database and start the
    background loop before Quart begins serving requests.
    """
    if not await SERVICE_APP.initialise():
        os._exit(1)

    app.db_pool = await create_db_pool(DatabaseConfig)

    if SERVICE_APP.create_schema_on_startup:
        try:
            await create_schema(app.db_pool, SERVICE_APP.logger)

        except (asyncpg.PostgresError, OSError) as ex:
            print(f"[FATAL] Unable to create database schema: {ex}",
                  flush=True)
            os._exit(1)

    app.background_task = asyncio.create_task(SERVICE_APP.run())


@app.after_serving
async def shutdown() -> None:
    """ Stop the background loop and close the connection pool. """
    SERVICE_APP.shutdown_event.set()

    if app is None:
        print("[WARN] app is None on shutdown, skipping cleanup", flush=True)
        return

    await cancel_background_tasks()

    pool = getattr(app, "db_pool", None)
    if pool is not None:
        await pool.close()


@app.before_request
async def acquire_connection():
    """
    Acquire a pooled connection for the request and store it in ``g.db``.

    Routes marked with ``route_not_using_db`` are skipped.

    Returns:
        tuple | None: A 503 JSON error if no connection became available in
            time, otherwise None so request processing continues.
    """
    view_func = app.view_functions.get(request.endpoint)
    if is_route_not_using_db(view_func):
        return None

    try:
        g.db = await app.db_pool.acquire(timeout=DB_ACQUIRE_TIMEOUT)

    except asyncio.TimeoutError:
        return {"error": "Service unavailable"}, 503

    return None


@app.after_request
async def release_connection(response):
    """
    Return the request's connection, if one was acquired, to the pool.

    Args:
        response (quart.wrappers.Response): Response of the request.

    Returns:
        quart.wrappers.Response: The same response object, unchanged.
    """
    db = getattr(g, "db", None)
    if db is not None:
        await app.db_pool.release(db)
        g.db = None
    return response


async def create_db_pool(config,
                         retries: int = 5,
                         base_delay: float = 1.0
                         ) -> asyncpg.pool.Pool:
    """
    Create the asyncpg connection pool, retrying transient failures.

    Authentication and unknown-database errors are fatal immediately; other
    connection errors are retried with exponential backoff plus jitter.
    When no pool can be created the background task is cancelled and the
    process exits.

    Args:
        config (DatabaseConfig): Connection parameters.
        retries (int, optional): Maximum number of attempts. Defaults to 5.
        base_delay (float, optional): Backoff base in seconds. Defaults to
            1.0.

    Returns:
        asyncpg.pool.Pool: The connection pool.
    """
    for attempt in range(1, retries + 1):
        try:
            pool = await asyncpg.create_pool(
                user=config.DB_USER,
                password=config.DB_PASSWORD,
                database=config.DB_NAME,
                host=config.DB_HOST,
                port=config.DB_PORT,
                min_size=1,
                max_size=10,
                timeout=5.0
            )

            print(f"[INFO] Connected to database {config.DB_NAME} "
                  f"on {config.DB_HOST}:{config.DB_PORT} (attempt {attempt})",
                  flush=True)

            return pool

        except asyncpg.InvalidPasswordError:
            print("[FATAL] Database authentication failed (check user/"
                  "password).", flush=True)
            break

        except asyncpg.InvalidCatalogNameError:
            print(f"[FATAL] Database '{config.DB_NAME}' does not exist.",
                  flush=True)
            break

        except asyncpg.CannotConnectNowError:
            print("[ERROR] Database is starting up or cannot accept "
                  "connections right now.", flush=True)

        except asyncio.TimeoutError:
            print("[ERROR] Database connection timed out.", flush=True)

        except OSError as ex:
            print(f"[ERROR] Database network/connection error: {ex}",
                  flush=True)

        except asyncpg.PostgresError as ex:
            print(f"[ERROR] Database general Postgres error: {ex}",
                  flush=True)

        if attempt < retries:
            delay = base_delay * (2 ** (attempt - 1))
            wait_time = delay + random.uniform(0, 0.3 * delay)
            print(f"[INFO] Retrying database connection in "
                  f"{wait_time:.1f}s...", flush=True)
            await asyncio.sleep(wait_time)

    else:
        print("[FATAL] All database retries exhausted. Could not connect!",
              flush=True)

    if app is not None:
        await cancel_background_tasks()

    os._exit(1)
