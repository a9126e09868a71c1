"""
ksonnet app detection.

A ksonnet app keeps its components in <root>/components/ and has an
app.yaml at <root>. Components import their parameters through two
ext-code variables, so a file inside an app needs those wired up
before jsonnet can evaluate it.
"""
from pathlib import Path
from typing import Dict, Optional, Union

APP_CONFIG = "app.yaml"
COMPONENTS_DIR = "components"

PathLike = Union[str, Path]


def find_app_root(file_path: PathLike) -> Optional[Path]:
    """
    Walk up from file_path looking for the nearest 'components' directory.
    Returns its parent when that parent holds app.yaml.
    """
    current = Path(file_path).absolute().parent
    while True:
        if current.name == COMPONENTS_DIR:
            root = current.parent
            if (root / APP_CONFIG).is_file():
                return root
            return None
        # Filesystem root has itself as parent
        if current.parent == current:
            return None
        current = current.parent


def is_in_app(file_path: PathLike) -> bool:
    return find_app_root(file_path) is not None


def root_path(file_path: PathLike) -> str:
    """App root as a string, or '' when the file is not inside an app."""
    root = find_app_root(file_path)
    return str(root) if root else ""


def ext_code_files(file_path: PathLike) -> Dict[str, str]:
    """The --ext-code-file imports a component needs, or {} outside an app."""
    root = find_app_root(file_path)
    if root is None:
        return {}

    component_dir = Path(file_path).absolute().parent
    return {
        "__ksonnet/params": str(component_dir / "params.libsonnet"),
        "__ksonnet/environments": str(root / "environments" / "default" / "params.libsonnet"),
    }
