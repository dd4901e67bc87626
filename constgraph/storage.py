"""JSON serialization helpers for dependency graphs."""

from __future__ import annotations

import json
from pathlib import Path

from networkx.readwrite import json_graph

from .graph import to_networkx
from .models import DependencyGraph


def save_graph(graph: DependencyGraph, path: str | Path) -> None:
    data = graph.to_dict()
    Path(path).write_text(json.dumps(data, indent=2), encoding="utf-8")


def load_graph(path: str | Path) -> DependencyGraph:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return DependencyGraph.from_dict(data)


def save_node_link(graph: DependencyGraph, path: str | Path) -> None:
    """Write the NetworkX node-link form, keyed by per-declaration node ids."""
    data = json_graph.node_link_data(to_networkx(graph))
    Path(path).write_text(json.dumps(data, indent=2), encoding="utf-8")
