"""End-to-end pipeline for building a constant graph from a project."""

from __future__ import annotations

import argparse
from pathlib import Path

from .builder import GraphBuilder
from .config import get_settings
from .file_walker import iter_script_files
from .ignore import IgnoreRules
from .logging_config import setup_logging
from .models import DependencyGraph
from .service import ProjectPathError, resolve_project_path
from .storage import save_graph, save_node_link
from .store import GraphStore


def build_graph_from_root(
    root: str | Path,
    output_path: str | Path | None = None,
    max_workers: int | None = None,
    node_link: bool = False,
) -> DependencyGraph:
    settings = get_settings()
    root_path = resolve_project_path(root)
    workers = max_workers if max_workers is not None else settings.MAX_WORKERS
    files = iter_script_files(root_path, IgnoreRules.load(root_path), settings.EXTENSIONS)

    graph = GraphBuilder(GraphStore(), max_workers=workers).build(files)

    if output_path:
        if node_link:
            save_node_link(graph, output_path)
        else:
            save_graph(graph, output_path)

    return graph


def main() -> int:
    parser = argparse.ArgumentParser(description="Build a constant dependency graph from a JS/TS project")
    parser.add_argument("--root", required=True, help="Root directory of the project")
    parser.add_argument(
        "--output",
        default="constgraph.json",
        help="Output JSON path",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Concurrent file scans (defaults to CONSTGRAPH_MAX_WORKERS)",
    )
    parser.add_argument(
        "--node-link",
        action="store_true",
        help="Write NetworkX node-link JSON instead of the API shape",
    )
    args = parser.parse_args()

    setup_logging(get_settings().LOG_LEVEL)
    try:
        graph = build_graph_from_root(args.root, args.output, args.workers, args.node_link)
    except ProjectPathError as exc:
        raise SystemExit(f"Error: {exc}") from exc
    print(len(graph.nodes), len(graph.edges))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
