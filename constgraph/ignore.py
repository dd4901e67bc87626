"""``.gitignore`` rule matching via ``pathspec``."""

from __future__ import annotations

import logging
from pathlib import Path

import pathspec


logger = logging.getLogger(__name__)

IGNORE_FILENAME = ".gitignore"


class IgnoreRules:
    """Patterns read from a project's ``.gitignore``.

    Matching follows gitwildmatch semantics: the last pattern matching a
    path decides, so ``!pattern`` re-includes paths an earlier pattern
    ignored.
    """

    def __init__(self, patterns: list[str]) -> None:
        self.patterns = patterns
        self.spec = pathspec.PathSpec.from_lines("gitwildmatch", patterns)

    @classmethod
    def load(cls, project_root: str | Path) -> "IgnoreRules | None":
        path = Path(project_root) / IGNORE_FILENAME
        if not path.is_file():
            logger.info("No %s found in %s, ignore rules disabled", IGNORE_FILENAME, project_root)
            return None
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            logger.warning("Could not read %s: %s", path, exc)
            return None
        rules = cls.parse(text)
        logger.info("Loaded %d rules from %s", len(rules.patterns), path)
        return rules

    @classmethod
    def parse(cls, text: str) -> "IgnoreRules":
        patterns = []
        for raw in text.splitlines():
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            patterns.append(line)
        return cls(patterns)

    def is_ignored(self, path: str, is_dir: bool = False) -> bool:
        """Match a project-relative path; directories need ``is_dir`` for ``dir/`` patterns."""
        normalized = path.replace("\\", "/").strip("/")
        if not normalized:
            return False
        if is_dir:
            normalized += "/"
        return self.spec.match_file(normalized)
