"""Project-level service tying the scanner, store and queries together."""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

import networkx as nx

from .builder import DEFAULT_MAX_WORKERS, BuildReport, GraphBuilder
from .file_walker import build_file_tree, iter_script_files
from .graph import to_networkx
from .ignore import IgnoreRules
from .models import DependencyGraph, FileNode
from .query import query_subgraph
from .store import GraphStore


logger = logging.getLogger(__name__)


class ConstGraphError(RuntimeError):
    pass


class ProjectPathError(ConstGraphError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{reason}: {path}")
        self.path = path
        self.reason = reason


def resolve_project_path(path: str | Path) -> str:
    candidate = Path(path)
    if not candidate.exists():
        raise ProjectPathError(str(path), "Project path does not exist")
    if not candidate.is_dir():
        raise ProjectPathError(str(path), "Project path is not a directory")
    return os.path.abspath(candidate)


@dataclass(frozen=True)
class GraphSnapshot:
    project_path: str
    generated_at: str | None
    node_count: int
    edge_count: int
    file_count: int


class DependencyService:
    def __init__(
        self,
        project_path: str | Path,
        max_workers: int = DEFAULT_MAX_WORKERS,
        extensions: Iterable[str] | None = None,
        store: GraphStore | None = None,
    ) -> None:
        self.project_path = resolve_project_path(project_path)
        self.max_workers = max_workers
        self.extensions = tuple(extensions) if extensions else None
        self.ignore = IgnoreRules.load(self.project_path)
        self.store = store or GraphStore()
        self.generated_at: str | None = None
        self.last_report: BuildReport | None = None
        self._build_lock = threading.Lock()

    def script_files(self) -> list[str]:
        return iter_script_files(self.project_path, self.ignore, self.extensions)

    def build(self) -> DependencyGraph:
        """Populate the owned store in place from the current file tree."""
        with self._build_lock:
            logger.info("Analyzing dependencies in %s", self.project_path)
            self.store.clear()
            builder = GraphBuilder(self.store, max_workers=self.max_workers)
            graph = builder.build(self.script_files())
            self._finish(builder)
            return graph

    def rebuild(self) -> DependencyGraph:
        """Build into a staging store, then swap it in.

        Readers keep seeing the previous graph until the swap.
        """
        with self._build_lock:
            logger.info("Rebuilding dependency graph for %s", self.project_path)
            self.ignore = IgnoreRules.load(self.project_path)
            staging = GraphStore()
            builder = GraphBuilder(staging, max_workers=self.max_workers)
            graph = builder.build(self.script_files())
            self.store.replace(graph)
            self._finish(builder)
            return graph

    def _finish(self, builder: GraphBuilder) -> None:
        self.last_report = builder.last_report
        self.generated_at = datetime.now(timezone.utc).isoformat()

    def graph(self) -> DependencyGraph:
        return self.store.snapshot()

    def file_dependencies(self, file_path: str | None = None) -> DependencyGraph:
        return query_subgraph(self.store.snapshot(), file_path, self.project_path)

    def file_tree(self) -> FileNode:
        return build_file_tree(self.project_path, self.ignore)

    def project_info(self) -> dict[str, str]:
        return {
            "projectPath": self.project_path,
            "projectName": os.path.basename(self.project_path),
        }

    def snapshot(self) -> GraphSnapshot:
        graph = self.store.snapshot()
        return GraphSnapshot(
            project_path=self.project_path,
            generated_at=self.generated_at,
            node_count=len(graph.nodes),
            edge_count=len(graph.edges),
            file_count=len({node.file_path for node in graph.nodes}),
        )

    def metadata(self) -> dict:
        snap = self.snapshot()
        data = {
            "project_path": snap.project_path,
            "generated_at": snap.generated_at,
            "node_count": snap.node_count,
            "edge_count": snap.edge_count,
            "file_count": snap.file_count,
        }
        if self.last_report is not None:
            data["last_build"] = self.last_report.to_dict()
        return data

    def stats(self, limit: int = 10) -> dict:
        graph = self.store.snapshot()
        if graph.is_empty():
            return {"kind_counts": {}, "file_breakdown": [], "top_hubs": [], "clusters": []}

        kind_counts: dict[str, int] = {}
        file_counts: dict[str, int] = {}
        for node in graph.nodes:
            kind_counts[node.kind] = kind_counts.get(node.kind, 0) + 1
            relative = os.path.relpath(node.file_path, self.project_path)
            file_counts[relative] = file_counts.get(relative, 0) + 1

        nxg = to_networkx(graph)
        hubs = sorted(nxg.degree(), key=lambda item: item[1], reverse=True)[:limit]
        hubs_payload = [
            {
                "name": nxg.nodes[node_id]["name"],
                "path": nxg.nodes[node_id]["path"],
                "degree": degree,
            }
            for node_id, degree in hubs
            if degree > 0
        ]

        top_files = sorted(file_counts.items(), key=lambda item: item[1], reverse=True)[:limit]

        return {
            "kind_counts": kind_counts,
            "file_breakdown": [{"file": path, "count": count} for path, count in top_files],
            "top_hubs": hubs_payload,
            "clusters": _cluster_sizes(nxg, limit=limit),
        }


def _cluster_sizes(graph: nx.MultiDiGraph, limit: int = 10) -> list[dict]:
    if graph.number_of_nodes() == 0:
        return []
    clusters = [len(component) for component in nx.weakly_connected_components(graph)]
    clusters.sort(reverse=True)
    return [
        {"cluster": idx + 1, "size": size}
        for idx, size in enumerate(clusters[:limit])
    ]
