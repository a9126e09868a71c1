import logging
import threading
import time
from pathlib import Path
from typing import Callable, Optional
from watchdog.observers import Observer
from watchdog.events import FileSystemEvent, FileSystemEventHandler

logger = logging.getLogger(__name__)

SaveCallback = Callable[[str], None]

# Event types that mean "the file on disk has new contents"
SAVE_EVENTS = ("modified", "created", "moved")


class SourceSaveHandler(FileSystemEventHandler):
    """
    Calls back when the active source file is saved. Editors save in
    different ways (write in place, write-new, rename-into-place), so
    several event types count as a save.
    """
    def __init__(self, target_file: str, callback: SaveCallback, debounce_seconds: float = 0.5):
        self.target_file = str(Path(target_file).resolve())
        self.callback = callback
        self.debounce_seconds = debounce_seconds
        self._last_saved = 0.0

    def _saved_path(self, event: FileSystemEvent) -> Optional[str]:
        if event.is_directory or event.event_type not in SAVE_EVENTS:
            return None
        if event.event_type == "moved":
            return event.dest_path
        return event.src_path

    def on_any_event(self, event: FileSystemEvent):
        path = self._saved_path(event)
        if path is None or str(Path(path).resolve()) != self.target_file:
            return

        now = time.monotonic()
        if now - self._last_saved <= self.debounce_seconds:
            return
        self._last_saved = now
        logger.debug("Save detected: %s", self.target_file)
        self.callback(self.target_file)


class FileWatcher:
    """
    One watchdog observer for the whole session. The watch follows the
    active document: start_watching() again moves it to another file.
    """
    def __init__(self):
        self.observer = Observer()
        self.watch = None
        self._lock = threading.Lock()

    def start_watching(self, file_path: str, callback: SaveCallback):
        path = Path(file_path).resolve()
        if not path.exists():
            raise FileNotFoundError(f"Cannot watch non-existent file: {file_path}")

        with self._lock:
            if self.watch is not None:
                self.observer.unschedule(self.watch)
            # Saves are seen as events on the parent directory
            handler = SourceSaveHandler(str(path), callback)
            self.watch = self.observer.schedule(handler, str(path.parent), recursive=False)
            if not self.observer.is_alive():
                self.observer.start()
        logger.info("Watching %s", path)

    def stop_watching(self):
        with self._lock:
            self.watch = None
            if self.observer.is_alive():
                self.observer.stop()
                self.observer.join()
