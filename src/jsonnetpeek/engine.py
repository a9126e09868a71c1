import logging
import threading
import time
from typing import Callable, Dict, Optional

from .compiler.driver import JsonnetDriver
from .parsing import extract_diagnostics
from .preview import (
    OUTPUT_FORMATS,
    Document,
    PreviewCache,
    PreviewPayload,
    Previewer,
    RenderFailure,
    is_failure,
    reformat,
)
from .utils.config import ConfigManager
from .utils.state import PreviewState
from .utils.watcher import FileWatcher

logger = logging.getLogger(__name__)


class PreviewEngine:
    """
    Wires the driver, the preview cache and diagnostics extraction
    together for the document that currently has focus.
    """

    def __init__(self, source_file: str, config_manager: Optional[ConfigManager] = None):
        self.config = config_manager if config_manager else ConfigManager()
        self.driver = JsonnetDriver(self.config)
        self.cache = PreviewCache()
        self.previewer = Previewer(self.driver, self.cache)
        self.state = PreviewState(
            source_path=str(source_file),
            output_format=self.config.get("output_format", "json"),
            ext_strs=self.config.ext_strs(),
        )
        self.watcher = FileWatcher()
        self.on_update_callback: Optional[Callable[[PreviewState], None]] = None
        # watchdog calls back from its own thread; one render at a time
        self._lock = threading.Lock()

    def start(self):
        self.refresh()
        self.watcher.start_watching(self.state.source_path, self._on_file_saved)

    def stop(self):
        self.watcher.stop_watching()

    def _on_file_saved(self, path: str):
        self.refresh()

    def open(self, source_file: str):
        """Make another document the active one; its predecessor's preview is dropped."""
        with self._lock:
            self.state.source_path = str(source_file)
            self.cache.clear()
        self.refresh()
        if self.watcher.watch is not None:
            self.watcher.start_watching(self.state.source_path, self._on_file_saved)

    def set_ext_strs(self, ext_strs: Dict[str, str]):
        self.config.override(ext_strs=dict(ext_strs))
        self.state.ext_strs = dict(ext_strs)
        self.refresh()

    def set_output_format(self, output_format: str):
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unsupported output format '{output_format}'")
        with self._lock:
            self.state.output_format = output_format
            # Cache read and apply must see the same payload
            payload = self.cache.get(self.state.source_path)
            if payload is not None:
                # Same payload, different serialization; jsonnet does not run again
                self._cycle(lambda: self._apply(payload))
                return
        self.refresh()

    def refresh(self):
        with self._lock:
            self._cycle(self._render)

    def _render(self):
        logger.info("Refreshing %s with ext-strs %s", self.state.source_path, self.state.ext_strs)
        with open(self.state.source_path, "r") as f:
            self.state.update_source(f.read())

        payload = self.previewer.render(
            Document(self.state.source_path, self.state.source_code)
        )
        self._apply(payload)

    def _cycle(self, step: Callable[[], None]):
        """Run one update; any error ends this cycle only and is shown in the state."""
        try:
            step()
        except Exception as e:
            logger.exception("Refresh failed for %s", self.state.source_path)
            self.state.compiler_output = f"Internal Engine Error: {e}"
            self.state.update_preview(self.state.compiler_output, failed=True)
            self.state.diagnostics = {}

        if self.on_update_callback:
            self.on_update_callback(self.state)

    def _apply(self, payload: PreviewPayload):
        if isinstance(payload, RenderFailure):
            self.state.compiler_output = payload.message
            self.state.diagnostics = extract_diagnostics(payload.message)
            logger.info(
                "Render failed: %d diagnostic(s) in %d file(s)",
                self.state.error_count, len(self.state.diagnostics),
            )
        else:
            self.state.compiler_output = ""
            self.state.diagnostics = {}

        # MalformedPayloadError propagates: the renderer broke its contract
        self.state.update_preview(reformat(payload, self.state.output_format), is_failure(payload))
        self.state.last_update = time.time()
