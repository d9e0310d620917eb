from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from valkey_demo.client import open_client
from valkey_demo.config import Settings
from valkey_demo.credentials import resolve
from valkey_demo.errors import ResolutionError, StoreConnectionError, StoreOperationError
from valkey_demo.store import KeyValueRecord, list_key_values, set_key_value

BASE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = BASE_DIR / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(tags=["ui"])

logger = logging.getLogger(__name__)


def _get_settings(request: Request) -> Settings:
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        raise HTTPException(status_code=500, detail="Settings not initialized")
    return settings


# Sync handlers: the store client blocks, so FastAPI runs these in its threadpool.


@router.get("/", response_class=HTMLResponse)
def ui_key_values_list(request: Request) -> HTMLResponse:
    settings = _get_settings(request)

    items: list[KeyValueRecord] = []
    try:
        descriptor = resolve(settings)
        with open_client(descriptor) as client:
            items = list_key_values(client)
    except ResolutionError:
        # Already logged by resolve(); render as an empty store.
        items = []
    except (StoreConnectionError, StoreOperationError) as exc:
        logger.warning("Failed to list key values: %s", exc)
        items = []

    return templates.TemplateResponse(
        request,
        "index.html",
        {"title": "Key Values", "active": "list", "items": items},
    )


@router.get("/key-values/new", response_class=HTMLResponse)
async def ui_key_values_new(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "new.html",
        {"title": "New Key Value", "active": "new"},
    )


@router.post("/key-values/create")
def ui_key_values_create(
    request: Request,
    key: str = Form(default=""),
    value: str = Form(default=""),
) -> RedirectResponse:
    settings = _get_settings(request)

    try:
        descriptor = resolve(settings)
        with open_client(descriptor) as client:
            set_key_value(client, key, value)
    except ResolutionError:
        # Logged by resolve().
        pass
    except (StoreConnectionError, StoreOperationError) as exc:
        logger.warning("Failed to set key %s: %s", key, exc)

    # The UI gives no feedback on failed writes.
    return RedirectResponse(url="/", status_code=302)
