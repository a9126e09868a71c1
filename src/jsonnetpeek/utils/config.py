import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

WORKSPACE_VARIABLE = "${workspaceFolder}"

DEFAULT_CONFIG: Dict[str, Any] = {
    "executable": "jsonnet",
    "kubecfg_executable": None,
    "lib_paths": [],
    "ext_strs": {},
    "output_format": "json",
    "yaml_stream": False,
    "workspace_folder": None,
    "timeout": None,
    "log_file": "/tmp/jsonnetpeek.log",
}


class ConfigManager:
    """
    User settings stored as JSON in ~/.jsonnetpeek/config.json.
    Missing keys fall back to DEFAULT_CONFIG.
    """

    def __init__(self):
        self.config_dir = Path.home() / ".jsonnetpeek"
        self.config_file = self.config_dir / "config.json"
        self.config = self.load_config()

    def load_config(self) -> Dict[str, Any]:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        config = DEFAULT_CONFIG.copy()
        if not self.config_file.exists():
            return config

        try:
            with open(self.config_file, "r") as f:
                user_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable config %s: %s", self.config_file, e)
            return config

        if isinstance(user_config, dict):
            config.update(user_config)
        return config

    def save_config(self):
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w") as f:
            json.dump(self.config, f, indent=2)

    def get(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def set(self, key: str, value: Any):
        self.config[key] = value
        self.save_config()

    def override(self, **values: Any):
        """Apply per-run overrides (e.g. from the command line) without saving."""
        for key, value in values.items():
            if value is not None:
                self.config[key] = value

    def workspace_folder(self) -> str:
        return self.get("workspace_folder") or os.getcwd()

    def lib_paths(self) -> List[str]:
        """Library search paths with ${workspaceFolder} expanded."""
        root = self.workspace_folder()
        return [str(p).replace(WORKSPACE_VARIABLE, root) for p in self.get("lib_paths") or []]

    def ext_strs(self) -> Dict[str, str]:
        return dict(self.get("ext_strs") or {})
