"""Administrative HTTP API.

Read-only listings of users, subscriptions and printers plus user deletion.
Printer state is read through the engine accessors, never the raw maps.
"""

from __future__ import annotations

from dataclasses import asdict
import logging
import sqlite3

from fastapi import APIRouter, FastAPI, HTTPException, Response

from adapters.sqlite_storage import SQLiteStorage
from core.engine import PollEngine

LOGGER = logging.getLogger(__name__)


def create_admin_app(storage: SQLiteStorage, engine: PollEngine) -> FastAPI:
    app = FastAPI(title="printwatch admin")
    router = APIRouter()

    @router.get("/users")
    def list_users() -> list[dict]:
        return [asdict(user) for user in storage.list_users()]

    @router.get("/delete/{chat_id}")
    def delete_user(chat_id: str) -> Response:
        if not chat_id.strip():
            raise HTTPException(status_code=400, detail="Invalid chatId")
        try:
            storage.delete_user(chat_id)
        except sqlite3.Error:
            LOGGER.exception("Failed to delete user %s", chat_id)
            raise HTTPException(status_code=500, detail="Failed to delete user")
        return Response(status_code=200, content="OK", media_type="text/plain")

    @router.get("/subscriptions")
    def list_subscriptions() -> list[dict]:
        return [asdict(subscription) for subscription in storage.list_subscriptions()]

    @router.get("/printers")
    def list_printers() -> list[dict]:
        printers = []
        for printer in engine.get_printer_states().values():
            job = printer.job_info
            printers.append(
                {
                    "uuid": printer.uuid,
                    "name": printer.name,
                    "printer_state": printer.printer_state,
                    "connect_state": printer.connect_state,
                    "job": asdict(job) if job else None,
                }
            )
        return printers

    app.include_router(router)
    return app
