"""File walking utilities."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable

from .ignore import IgnoreRules
from .models import FileNode


logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx")
DEFAULT_EXCLUDES = {"node_modules", ".git"}


def _excluded_dir(name: str, excludes: set[str]) -> bool:
    return name in excludes or name.startswith(".")


def _relative(path: Path, root: Path) -> str:
    return path.relative_to(root).as_posix()


def iter_script_files(
    root: str | Path,
    ignore: IgnoreRules | None = None,
    extensions: Iterable[str] | None = None,
    excludes: Iterable[str] | None = None,
) -> list[str]:
    """Return absolute paths of script files under ``root``, sorted."""
    root_path = Path(os.path.abspath(root))
    suffixes = tuple(extensions or DEFAULT_EXTENSIONS)
    exclude_set = set(excludes or DEFAULT_EXCLUDES)
    matches: list[str] = []

    def on_error(exc: OSError) -> None:
        logger.warning("Error walking %s: %s", exc.filename, exc)

    for dirpath, dirnames, filenames in os.walk(root_path, onerror=on_error):
        current = Path(dirpath)
        kept = []
        for name in sorted(dirnames):
            if _excluded_dir(name, exclude_set):
                continue
            relative = _relative(current / name, root_path)
            if ignore is not None and ignore.is_ignored(relative, is_dir=True):
                continue
            kept.append(name)
        dirnames[:] = kept

        for name in filenames:
            if not name.endswith(suffixes):
                continue
            path = current / name
            if ignore is not None and ignore.is_ignored(_relative(path, root_path)):
                continue
            matches.append(str(path))

    return sorted(matches)


def build_file_tree(
    root: str | Path,
    ignore: IgnoreRules | None = None,
    relative_path: str = "",
) -> FileNode:
    """Describe the directory tree under ``root`` for the file explorer."""
    root_path = Path(os.path.abspath(root))
    abs_path = root_path / relative_path if relative_path else root_path
    try:
        is_dir = abs_path.is_dir()
        exists = is_dir or abs_path.exists()
    except OSError as exc:
        logger.warning("Error getting file info for %s: %s", abs_path, exc)
        return FileNode(name="", path="", is_dir=False)
    if not exists:
        logger.warning("Path does not exist: %s", abs_path)
        return FileNode(name="", path="", is_dir=False)

    name = abs_path.name if relative_path else root_path.name
    node = FileNode(name=name, path=relative_path, is_dir=is_dir)
    if not is_dir:
        return node

    try:
        entries = sorted(abs_path.iterdir(), key=lambda entry: entry.name)
    except OSError as exc:
        logger.warning("Error reading directory %s: %s", abs_path, exc)
        return node

    for entry in entries:
        child_path = f"{relative_path}/{entry.name}" if relative_path else entry.name
        if ignore is not None and ignore.is_ignored(child_path, is_dir=entry.is_dir()):
            continue
        node.children.append(build_file_tree(root_path, ignore, child_path))

    return node
