"""Infer dependency edges between constants declared in the same file."""

from __future__ import annotations

import logging
from itertools import groupby
from typing import Iterable

from .models import ConstantRecord, DependencyEdge


logger = logging.getLogger(__name__)


def infer_dependencies(
    constants: Iterable[ConstantRecord],
    file_path: str | None = None,
) -> list[DependencyEdge]:
    """Return an edge ``A -> B`` whenever ``B.name`` occurs inside ``A.value``.

    Only pairs declared in the same file are compared; pass ``file_path`` to
    restrict the scan to one file. Containment is a plain substring check, so
    ``ID`` also matches inside ``USER_ID_PREFIX``.
    """
    if file_path is not None:
        scoped = [record for record in constants if record.file_path == file_path]
    else:
        scoped = sorted(constants, key=lambda record: record.file_path)

    edges: list[DependencyEdge] = []
    for path, group in groupby(scoped, key=lambda record: record.file_path):
        edges.extend(_file_edges(path, list(group)))
    return edges


def _file_edges(path: str, records: list[ConstantRecord]) -> list[DependencyEdge]:
    edges: list[DependencyEdge] = []
    for record in records:
        if not record.value:
            continue
        for other in records:
            if other is record or not other.name or other.name == record.name:
                continue
            if other.name in record.value:
                edges.append(DependencyEdge(source=record.name, target=other.name, file_path=path))
                logger.debug(
                    "Found dependency: %s -> %s in file %s", record.name, other.name, path
                )
    return edges
