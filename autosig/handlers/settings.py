"""HTTP routes backing the signature settings pane."""

from __future__ import annotations

import logging

from aiohttp import web

from autosig.config import settings
from autosig.services.preferences import (
    PreferenceError,
    PreferenceStore,
    load_preferences,
    save_preferences,
)
from autosig.services.selector import resolve_slot, select_template
from autosig.services.templates import render_signature
from autosig.utils.enums import ComposeKind

logger = logging.getLogger(__name__)

settings_routes = web.RouteTableDef()


def _store(request: web.Request) -> PreferenceStore:
    return request.app["store"]


def _not_found(user_id: str) -> web.Response:
    return web.json_response(
        {"error": "not_found", "detail": f"No signature settings for {user_id}"},
        status=404,
    )


@settings_routes.get("/health")
async def health(request: web.Request) -> web.Response:
    """Health check endpoint for monitoring / container probes."""
    info: dict = {
        "status": "ok",
        "backend": "sql" if settings.use_sql_backend else "redis",
    }
    redis_conn = request.app.get("redis")
    if redis_conn is not None:
        try:
            await redis_conn.ping()
            info["redis"] = "ok"
        except Exception:
            info["redis"] = "error"
    return web.json_response(info)


@settings_routes.get("/users/{user_id}/settings")
async def get_settings(request: web.Request) -> web.Response:
    user_id = request.match_info["user_id"]
    preferences = await load_preferences(_store(request), user_id)
    if preferences is None:
        return _not_found(user_id)
    return web.json_response({
        "user_info": preferences.profile.to_dict(),
        "templates": preferences.templates(),
    })


@settings_routes.put("/users/{user_id}/settings")
async def put_settings(request: web.Request) -> web.Response:
    user_id = request.match_info["user_id"]
    try:
        body = await request.json()
    except ValueError:
        return web.json_response({"error": "invalid_json"}, status=400)
    if not isinstance(body, dict):
        return web.json_response({"error": "invalid_body"}, status=400)

    templates = body.get("templates") or {}
    if not isinstance(templates, dict):
        return web.json_response({"error": "invalid_body", "detail": "templates must be an object"}, status=400)

    try:
        await save_preferences(_store(request), user_id, body.get("user_info"), templates)
    except PreferenceError as e:
        return web.json_response({"error": "invalid_settings", "detail": str(e)}, status=400)

    return web.json_response({"status": "saved"})


@settings_routes.get("/users/{user_id}/signature")
async def preview_signature(request: web.Request) -> web.Response:
    """Render the signature a given compose kind would get, without a host."""
    user_id = request.match_info["user_id"]
    preferences = await load_preferences(_store(request), user_id)
    if preferences is None:
        return _not_found(user_id)

    compose_kind = request.query.get("compose", ComposeKind.NEW_MAIL.value)
    template = select_template(compose_kind, preferences)
    artifact = render_signature(template, preferences.profile)
    return web.json_response({
        "compose": compose_kind,
        "slot": resolve_slot(compose_kind).value,
        "template": template.value,
        "markup": artifact.markup,
        "image_name": artifact.image_name,
    })
