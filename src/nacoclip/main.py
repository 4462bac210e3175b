#!/usr/bin/env python3

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from nacoclip.clipboard import PlatformClipboard, get_clipboard
from nacoclip.config import STORAGE_BACKENDS, AppConfig
from nacoclip.database import FileStorage, KeyValueStorage, RedisStorage
from nacoclip.errors import NacoClipError, StorageError
from nacoclip.models import ClipboardEntry, Notification, Notifier
from nacoclip.services import (ClipboardDispatcher, FileUpload, IngestionAdapter, ItemStore,
                               Notepad, PersistenceLayer)
from nacoclip.utils import FileManager

logger = logging.getLogger(__name__)


class NacoClipApp:
    """Wires storage, the item store, ingestion and copy dispatch together.

    The system clipboard is only touched by ``paste``, ``copy`` and the
    hotkeys, so list/add/delete/move work on machines without one.
    """

    def __init__(
        self,
        config: AppConfig,
        clipboard: Optional[PlatformClipboard] = None,
        storage: Optional[KeyValueStorage] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.config = config
        self.notifier = notifier or self._log_notification
        self.storage = storage or self._create_storage()
        self.persistence = PersistenceLayer(self.storage)
        self.store = ItemStore(
            self.persistence,
            notifier=self.notifier,
            max_entries=config.max_entries,
            max_payload_bytes=config.max_payload_bytes,
        )
        self.ingestion = IngestionAdapter(self.store, notifier=self.notifier)
        self.notepad = Notepad(self.persistence)
        self._clipboard = clipboard
        self._dispatcher: Optional[ClipboardDispatcher] = None

    def _create_storage(self) -> KeyValueStorage:
        if self.config.storage == "redis":
            redis_config = self.config.redis
            try:
                storage = RedisStorage(
                    host=redis_config.host,
                    port=redis_config.port,
                    db=redis_config.db,
                    password=redis_config.password,
                    key_prefix=redis_config.key_prefix,
                )
                logger.info("Using Redis storage at %s:%s/%s",
                            redis_config.host, redis_config.port, redis_config.db)
                return storage
            except StorageError as e:
                logger.warning(
                    "Redis unavailable, falling back to file storage: %s", e)
        return FileStorage(self.config.data_dir)

    @staticmethod
    def _log_notification(notification: Notification) -> None:
        if notification.description:
            logger.info("%s: %s", notification.title, notification.description)
        else:
            logger.info("%s", notification.title)

    @property
    def clipboard(self) -> PlatformClipboard:
        if self._clipboard is None:
            self._clipboard = get_clipboard()
        return self._clipboard

    @property
    def dispatcher(self) -> ClipboardDispatcher:
        if self._dispatcher is None:
            file_manager = None
            if self.config.copy_file_payload:
                file_manager = FileManager(self.config.files_dir)
                file_manager.cleanup_old_files()
            self._dispatcher = ClipboardDispatcher(
                self.clipboard, notifier=self.notifier, file_manager=file_manager)
        return self._dispatcher

    # ------------------------------------------------------------------
    # Operations exposed to the UI
    # ------------------------------------------------------------------
    def add_text(self, text: str) -> Optional[ClipboardEntry]:
        return self.ingestion.ingest_text(text)

    def upload(self, path: Path) -> Optional[ClipboardEntry]:
        upload = FileUpload.from_path(path)
        return asyncio.run(self.ingestion.ingest_upload(upload))

    def paste(self) -> List[ClipboardEntry]:
        items = self.clipboard.read_items()
        if not items:
            logger.info("Clipboard is empty")
        return asyncio.run(self.ingestion.ingest_paste(items))

    def delete(self, index: int) -> Optional[ClipboardEntry]:
        return self.store.delete(index)

    def move(self, from_index: int, to_index: int) -> bool:
        return self.store.reorder(from_index, to_index)

    def copy(self, index: int) -> bool:
        return self.dispatcher.copy_index(self.store, index)

    def run_hotkeys(self) -> None:
        from nacoclip.services.hotkeys import HotkeyService

        service = HotkeyService(on_shortcut=self.copy)
        print("NacoClip hotkeys active (ctrl+1..ctrl+9). Press Ctrl+C to stop")
        service.run_forever()

    def close(self) -> None:
        self.persistence.close()

    def __enter__(self) -> "NacoClipApp":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def print_notification(notification: Notification) -> None:
    if notification.description:
        print(f"{notification.title}: {notification.description}")
    else:
        print(notification.title)


def print_entries(entries) -> None:
    if not entries:
        print("Clipboard is empty")
        return
    for index, entry in enumerate(entries):
        print(f"{index:>3}  {entry.kind.label:<5}  {entry.display_text}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nacoclip",
        description="NacoClip - collect text, images and files and copy them back"
    )

    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory for stored entries (default: $NACOCLIP_DATA_DIR or ~/.nacoclip)"
    )

    parser.add_argument(
        "--storage",
        choices=STORAGE_BACKENDS,
        default=None,
        help="Storage backend (default: $NACOCLIP_STORAGE or file)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    add = commands.add_parser("add", help="Add a text entry")
    add.add_argument("text")

    upload = commands.add_parser("upload", help="Add a file or image entry")
    upload.add_argument("path", type=Path)

    commands.add_parser("paste", help="Add the current system clipboard contents")
    commands.add_parser("list", help="Show stored entries")

    delete = commands.add_parser("delete", help="Delete the entry at INDEX")
    delete.add_argument("index", type=int)

    move = commands.add_parser("move", help="Move an entry to another position")
    move.add_argument("from_index", type=int)
    move.add_argument("to_index", type=int)

    copy = commands.add_parser("copy", help="Copy the entry at INDEX to the system clipboard")
    copy.add_argument("index", type=int)

    notepad = commands.add_parser("notepad", help="Show or change the notepad text")
    group = notepad.add_mutually_exclusive_group()
    group.add_argument("--set", dest="text", default=None)
    group.add_argument("--clear", action="store_true")

    commands.add_parser("hotkeys", help="Copy entries with ctrl+1..ctrl+9")

    return parser


def run(app: NacoClipApp, args: argparse.Namespace) -> int:
    command = args.command

    if command == "add":
        return 0 if app.add_text(args.text) else 1
    if command == "upload":
        return 0 if app.upload(args.path) else 1
    if command == "paste":
        return 0 if app.paste() else 1
    if command == "list":
        print_entries(app.store.entries)
        return 0
    if command == "delete":
        return 0 if app.delete(args.index) else 1
    if command == "move":
        return 0 if app.move(args.from_index, args.to_index) else 1
    if command == "copy":
        return 0 if app.copy(args.index) else 1
    if command == "notepad":
        if args.clear:
            app.notepad.clear()
        elif args.text is not None:
            app.notepad.save(args.text)
        else:
            print(app.notepad.text)
        return 0
    if command == "hotkeys":
        app.run_hotkeys()
        return 0

    raise ValueError(f"Unknown command: {command}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = AppConfig.from_env()
        overrides = {}
        if args.data_dir is not None:
            overrides["data_dir"] = args.data_dir
        if args.storage is not None:
            overrides["storage"] = args.storage
        if overrides:
            config = replace(config, **overrides)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(level=config.log_level, format='%(levelname)s: %(message)s')
    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)

    try:
        with NacoClipApp(config, notifier=print_notification) as app:
            return run(app, args)
    except NotImplementedError as e:
        logger.error("%s", e)
        return 1
    except (NacoClipError, OSError) as e:
        logger.error("Error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
