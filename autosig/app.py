"""Application factory – builds the preference store, action registry and the
settings HTTP service, then serves it."""

from __future__ import annotations

import asyncio
import logging

import redis.asyncio as aioredis
from aiohttp import web

from autosig.actions import ActionRegistry
from autosig.config import settings
from autosig.services.preferences import PreferenceStore

logger = logging.getLogger(__name__)


def create_store(redis: aioredis.Redis | None = None) -> PreferenceStore:
    """Construct the configured preference store backend."""
    if settings.use_sql_backend:
        from autosig.db.engine import async_session
        from autosig.services.preferences import SqlPreferenceStore

        return SqlPreferenceStore(async_session)

    from autosig.services.preferences import RedisPreferenceStore

    if redis is None:
        redis = aioredis.from_url(settings.REDIS_URL, decode_responses=True)
    return RedisPreferenceStore(redis)


def create_actions(store: PreferenceStore) -> ActionRegistry:
    """Register all host actions and middleware."""
    from autosig.handlers.compose import register_compose_actions
    from autosig.middleware.logging_mw import ActionLoggingMiddleware

    registry = ActionRegistry()
    registry["store"] = store
    registry.middleware(ActionLoggingMiddleware())
    register_compose_actions(registry)
    return registry


def create_web_app(
    store: PreferenceStore,
    actions: ActionRegistry | None = None,
    redis: aioredis.Redis | None = None,
) -> web.Application:
    from autosig.handlers.settings import settings_routes

    app = web.Application()
    app["store"] = store
    app["actions"] = actions or create_actions(store)
    if redis is not None:
        app["redis"] = redis
    app.add_routes(settings_routes)
    return app


async def _on_startup() -> None:
    """Create tables when preferences live in the database."""
    if not settings.use_sql_backend:
        return

    from autosig.db.base import Base
    from autosig.db.engine import engine

    # Import models so they register on metadata
    from autosig.models.user_setting import UserSetting  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured.")


async def _on_shutdown(redis: aioredis.Redis | None) -> None:
    logger.info("Shutting down…")
    if redis is not None:
        await redis.close()

    if settings.use_sql_backend:
        from autosig.db.engine import engine

        await engine.dispose()
    logger.info("Shutdown complete.")


async def main() -> None:
    """Entry point."""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )

    redis = None
    if not settings.use_sql_backend:
        redis = aioredis.from_url(settings.REDIS_URL, decode_responses=True)

    await _on_startup()
    store = create_store(redis)
    actions = create_actions(store)
    app = create_web_app(store, actions, redis)
    logger.info("Actions registered: %s", ", ".join(actions.names))

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host=settings.HTTP_HOST, port=settings.HTTP_PORT)
    await site.start()
    logger.info("Settings service listening on %s:%d", settings.HTTP_HOST, settings.HTTP_PORT)
    try:
        # Keep running until interrupted
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()
        await _on_shutdown(redis)
