"""NetworkX views of a constant dependency graph."""

from __future__ import annotations

import networkx as nx

from .models import ConstantRecord, DependencyEdge, DependencyGraph


NODE_CONSTANT = "Constant"
EDGE_REFERENCES = "REFERENCES"


def constant_node_id(record: ConstantRecord) -> str:
    return f"const:{record.file_path}:{record.line_number}:{record.name}"


def to_networkx(graph: DependencyGraph) -> nx.MultiDiGraph:
    """Convert ``graph`` to a MultiDiGraph keyed by per-declaration node ids.

    Edge endpoints are resolved by name within the edge's file first, then
    against any declaration with that name. Edges whose endpoints cannot be
    resolved are dropped.
    """
    nxg = nx.MultiDiGraph()
    by_file_name: dict[tuple[str, str], str] = {}
    by_name: dict[str, str] = {}

    for record in graph.nodes:
        node_id = constant_node_id(record)
        nxg.add_node(
            node_id,
            type=NODE_CONSTANT,
            name=record.name,
            value=record.value,
            kind=record.kind,
            path=record.file_path,
            line=record.line_number,
        )
        by_file_name.setdefault((record.file_path, record.name), node_id)
        by_name.setdefault(record.name, node_id)

    for edge in graph.edges:
        source_id = _resolve(edge.source, edge.file_path, by_file_name, by_name)
        target_id = _resolve(edge.target, edge.file_path, by_file_name, by_name)
        if source_id is None or target_id is None:
            continue
        nxg.add_edge(source_id, target_id, type=EDGE_REFERENCES, path=edge.file_path)

    return nxg


def from_networkx(nxg: nx.MultiDiGraph) -> DependencyGraph:
    graph = DependencyGraph()
    for _, data in nxg.nodes(data=True):
        graph.nodes.append(
            ConstantRecord(
                name=data["name"],
                value=data.get("value", ""),
                kind=data.get("kind", "unknown"),
                file_path=data.get("path", ""),
                line_number=int(data.get("line", 0)),
            )
        )
    for source, target, data in nxg.edges(data=True):
        graph.edges.append(
            DependencyEdge(
                source=nxg.nodes[source]["name"],
                target=nxg.nodes[target]["name"],
                file_path=data.get("path"),
            )
        )
    return graph


def _resolve(
    name: str,
    file_path: str | None,
    by_file_name: dict[tuple[str, str], str],
    by_name: dict[str, str],
) -> str | None:
    if file_path is not None and (file_path, name) in by_file_name:
        return by_file_name[(file_path, name)]
    return by_name.get(name)
