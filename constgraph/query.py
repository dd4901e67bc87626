"""Per-file views of a dependency graph."""

from __future__ import annotations

import os

from .models import ConstantRecord, DependencyEdge, DependencyGraph


def normalize_file_path(file_path: str, project_root: str) -> str:
    """Resolve ``file_path`` to the absolute form stored on constant records."""
    root = os.path.normpath(project_root) if project_root else ""
    if os.path.isabs(file_path) or (root and file_path.startswith(root)):
        return os.path.normpath(file_path)
    return os.path.normpath(os.path.join(root, file_path))


def query_subgraph(
    graph: DependencyGraph,
    file_path: str | None,
    project_root: str = "",
) -> DependencyGraph:
    """Return the part of ``graph`` relevant to one file.

    Without a path the whole graph is returned as a copy. With a path the
    result holds the file's constants, every edge touching them, and the
    far endpoint of any such edge declared elsewhere (one-hop closure), so
    no edge in the result points at a missing node.

    Edges carrying their declaring file touch the file only when that file
    matches; edges without one fall back to matching endpoint names.
    """
    if graph.is_empty():
        return DependencyGraph()
    if not file_path:
        return DependencyGraph(nodes=list(graph.nodes), edges=list(graph.edges))

    target = normalize_file_path(file_path, project_root)

    nodes = [node for node in graph.nodes if node.file_path == target]
    local_names = {node.name for node in nodes}

    edges = [edge for edge in graph.edges if _touches(edge, target, local_names)]

    included = {(node.file_path, node.name) for node in nodes}
    for edge in edges:
        for name in (edge.source, edge.target):
            if edge.file_path == target and name in local_names:
                continue
            if edge.file_path is None and name in local_names:
                continue
            node = _resolve(graph, name, edge.file_path)
            if node is None or (node.file_path, node.name) in included:
                continue
            included.add((node.file_path, node.name))
            nodes.append(node)

    return DependencyGraph(nodes=nodes, edges=edges)


def _touches(edge: DependencyEdge, target: str, local_names: set[str]) -> bool:
    if edge.file_path is not None:
        return edge.file_path == target
    return edge.source in local_names or edge.target in local_names


def _resolve(graph: DependencyGraph, name: str, preferred_file: str | None) -> ConstantRecord | None:
    fallback = None
    for node in graph.nodes:
        if node.name != name:
            continue
        if preferred_file is None or node.file_path == preferred_file:
            return node
        if fallback is None:
            fallback = node
    return fallback
