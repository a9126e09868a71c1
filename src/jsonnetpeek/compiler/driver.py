import logging
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Tuple

from .ksonnet import ext_code_files
from ..utils.config import ConfigManager

logger = logging.getLogger(__name__)

KNOWN_RENDERERS = ["jsonnet", "jrsonnet", "kubecfg"]


def failure_report(command: List[str], detail: str) -> str:
    """
    Failure text in the shape the diagnostics parser expects: a banner
    line naming the command, then whatever the renderer printed.
    """
    return f"Command failed: {shlex.join(command)}\n{detail}"


class JsonnetDriver:
    def __init__(self, config_manager: Optional[ConfigManager] = None):
        # Use provided config or load default
        self.config = config_manager if config_manager else ConfigManager()

        self.set_executable(self.config.get("executable", "jsonnet"))

        kubecfg = self.config.get("kubecfg_executable")
        if kubecfg is None and shutil.which("kubecfg"):
            kubecfg = "kubecfg"
        self.kubecfg = kubecfg

    def set_executable(self, executable: str):
        """
        Updates the jsonnet binary used by the driver.
        """
        path = shutil.which(executable)
        if not path:
            # Keep going so the app can start; render() reports it.
            logger.warning("Jsonnet executable '%s' not found on PATH.", executable)
        self.executable = executable
        self.executable_path = path

    @staticmethod
    def discover_renderers() -> List[str]:
        """
        Returns the known renderers found on the system.
        """
        return [r for r in KNOWN_RENDERERS if shutil.which(r)]

    def build_args(self, source_file: str) -> List[str]:
        """
        Arguments shared by jsonnet and `kubecfg show`, ending with the file.
        """
        args: List[str] = []

        # --- 1. Library search paths ---
        for lib in self.config.lib_paths():
            args.extend(["-J", lib])

        # --- 2. External string variables ---
        for key, value in self.config.ext_strs().items():
            args.extend(["--ext-str", f"{key}={value}"])

        # --- 3. ksonnet component imports ---
        for key, path in ext_code_files(source_file).items():
            args.extend(["--ext-code-file", f"{key}={path}"])

        args.append(str(source_file))
        return args

    def build_command(self, source_file: str) -> List[str]:
        command = [self.executable]
        # -y emits a '---' separated document stream
        if self.config.get("yaml_stream"):
            command.append("-y")
        command.extend(self.build_args(source_file))
        return command

    def build_kubecfg_command(self, source_file: str) -> List[str]:
        return [self.kubecfg, "show", "-o", "json"] + self.build_args(source_file)

    def render(self, source_file: str) -> Tuple[str, str]:
        """
        Evaluates the source file.
        Returns: (Output String, Error String); the error is "" on success.
        """
        kubecfg_error = ""
        if self.kubecfg:
            output, error = self._run(self.build_kubecfg_command(source_file))
            if not error and output != "":
                return output, ""
            logger.info("kubecfg could not render %s, falling back to %s", source_file, self.executable)
            kubecfg_error = error

        command = self.build_command(source_file)
        if not self.executable_path and not shutil.which(self.executable):
            if kubecfg_error:
                # kubecfg's own report is the only one there is
                logger.warning("Cannot fall back: '%s' not found on PATH", self.executable)
                return "", kubecfg_error
            return "", failure_report(command, f"could not find '{self.executable}' command on path")
        return self._run(command)

    def _run(self, command: List[str]) -> Tuple[str, str]:
        logger.debug("Running %s", shlex.join(command))
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                check=False,
                timeout=self.config.get("timeout"),
            )
        except subprocess.TimeoutExpired as e:
            return "", failure_report(command, f"timed out after {e.timeout} seconds")
        except OSError as e:
            return "", failure_report(command, str(e))

        if result.returncode != 0:
            return "", failure_report(command, result.stderr)
        return result.stdout, ""
