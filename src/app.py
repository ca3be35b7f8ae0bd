"""Application entry point for the printwatch poller."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

import aiohttp
import uvicorn
from art import tprint
from dotenv import load_dotenv

import settings
from adapters.admin_api import create_admin_app
from adapters.debug_dump import DebugSnapshotWriter
from adapters.notification_formatting import format_event, humanize_duration
from adapters.prusa_connect import PrusaConnectClient
from adapters.sqlite_storage import SQLiteStorage
from adapters.telegram_bot_notifier import TelegramBotNotifier
from adapters.telegram_notifier import TelegramClientNotifier
from client import build_client
from core.config import PollingConfig, ThrottleConfig
from core.dispatcher import Dispatcher
from core.engine import PollEngine
from core.scheduler import PollScheduler
from core.throttle import NotificationThrottler

NAME = "PRINTWATCH"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/printwatch.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _open_storage() -> SQLiteStorage:
    storage = SQLiteStorage(settings.DB_PATH)
    storage.init_db()
    return storage


async def _serve(storage: SQLiteStorage) -> None:
    logger = logging.getLogger(__name__)

    bot_token = os.getenv("TELEGRAM_BOT_TOKEN")
    if not bot_token:
        raise RuntimeError("TELEGRAM_BOT_TOKEN is required")

    async with aiohttp.ClientSession() as session:
        # Missing cookie raises AuthenticationError before anything is polled.
        source = PrusaConnectClient(
            session,
            os.getenv("PRUSA_CONNECT_COOKIE"),
            base_url=settings.PRUSA_BASE_URL,
        )

        # Select the notification adapter based on configuration to keep the
        # core engine independent from delivery details.
        telegram_client = None
        if settings.NOTIFICATION_METHOD == "bot":
            messenger = TelegramBotNotifier(session, bot_token)
        elif settings.NOTIFICATION_METHOD == "client":
            telegram_client = build_client()
            await telegram_client.start(bot_token=bot_token)
            messenger = TelegramClientNotifier(telegram_client)
        else:
            raise RuntimeError("notification_method must be 'bot' or 'client'")
        logger.info("Selected notification method - %s", settings.NOTIFICATION_METHOD)

        throttle_config = ThrottleConfig(
            min_interval=settings.THROTTLE_MIN_INTERVAL_SECONDS,
            max_interval=settings.THROTTLE_MAX_INTERVAL_SECONDS,
        )
        polling_config = PollingConfig(interval=settings.POLLING_INTERVAL_SECONDS)

        dispatcher = Dispatcher(
            registry=storage,
            messenger=messenger,
            source=source,
            formatter=format_event,
        )
        engine = PollEngine(
            source=source,
            dispatcher=dispatcher,
            throttler=NotificationThrottler(throttle_config),
            snapshot_sink=DebugSnapshotWriter(settings.DEBUG_DIRECTORY) if settings.WRITE_DEBUG_FILES else None,
            describe_duration=humanize_duration,
        )
        scheduler = PollScheduler(engine.run_cycle, polling_config.interval)
        scheduler.start()
        logger.info("Bot is running")

        try:
            if settings.HTTP_ENABLED:
                server = uvicorn.Server(
                    uvicorn.Config(
                        create_admin_app(storage, engine),
                        host=settings.HTTP_HOST,
                        port=settings.HTTP_PORT,
                        log_config=None,
                    )
                )
                logger.info("Server is running on http://%s:%s", settings.HTTP_HOST, settings.HTTP_PORT)
                await server.serve()
            else:
                await asyncio.Event().wait()
        finally:
            # Let an in-flight cycle finish its sends before tearing down.
            scheduler.stop()
            await scheduler.wait_idle()
            if telegram_client is not None:
                await telegram_client.disconnect()


def _run() -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting printwatch")
    storage = _open_storage()
    try:
        asyncio.run(_serve(storage))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")


def _list_users() -> None:
    for user in _open_storage().list_users():
        flags = []
        if user.authed:
            flags.append("authed")
        if user.banned:
            flags.append("banned")
        print(f"{user.chat_id} | {', '.join(flags) or '-'}")


def _list_subscriptions() -> None:
    for subscription in _open_storage().list_subscriptions():
        print(f"{subscription.chat_id} -> {subscription.printer_id}")


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="printwatch")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start polling and notifying")
    subparsers.add_parser("users", help="List known chats")
    subparsers.add_parser("subscriptions", help="List chat to printer subscriptions")
    for name, help_text in (
        ("subscribe", "Subscribe a chat to a printer"),
        ("unsubscribe", "Remove a chat's printer subscription"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("chat_id")
        sub.add_argument("printer_id")

    args = parser.parse_args(argv)
    if args.command == "users":
        _list_users()
        return
    if args.command == "subscriptions":
        _list_subscriptions()
        return
    if args.command == "subscribe":
        _open_storage().subscribe(args.chat_id, args.printer_id)
        return
    if args.command == "unsubscribe":
        _open_storage().unsubscribe(args.chat_id, args.printer_id)
        return
    _run()


if __name__ == "__main__":
    main()
