"""Two-phase, bounded-concurrency population of a GraphStore."""

from __future__ import annotations

import logging
import os
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Callable, Sequence

from .dependencies import infer_dependencies
from .extract import extract_constants
from .models import ConstantRecord, DependencyGraph
from .store import GraphStore


logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 10


@dataclass
class BuildReport:
    file_count: int = 0
    node_count: int = 0
    edge_count: int = 0
    skipped: list[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    def to_dict(self) -> dict:
        return {
            "file_count": self.file_count,
            "node_count": self.node_count,
            "edge_count": self.edge_count,
            "skipped": list(self.skipped),
            "elapsed_seconds": round(self.elapsed_seconds, 3),
        }


def read_source(path: str) -> str:
    with open(path, "r", encoding="utf-8", errors="replace") as handle:
        return handle.read()


class GraphBuilder:
    """Fill ``store`` from a list of files.

    Phase A extracts constants from every file; phase B infers edges once
    the full node set is known. Each phase runs on a thread pool whose
    submissions pass through a semaphore of ``max_workers`` slots and ends
    at a barrier that joins every task. A failing file is logged and
    skipped without affecting its siblings.
    """

    def __init__(self, store: GraphStore, max_workers: int = DEFAULT_MAX_WORKERS) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.store = store
        self.max_workers = max_workers
        self.last_report: BuildReport | None = None
        self._report_lock = threading.Lock()

    def build(self, files: Sequence[str]) -> DependencyGraph:
        started = time.perf_counter()
        report = BuildReport(file_count=len(files))
        self.last_report = report
        logger.info("Found %d script files", len(files))

        self._run_phase("constants", files, self._find_constants)
        nodes = self.store.snapshot().nodes
        logger.info("Found %d constants", len(nodes))

        by_file: dict[str, list[ConstantRecord]] = {}
        for record in nodes:
            by_file.setdefault(record.file_path, []).append(record)

        def find_dependencies(path: str) -> None:
            os.stat(path)
            self.store.add_edges(infer_dependencies(by_file.get(path, []), file_path=path))

        self._run_phase("dependencies", files, find_dependencies)
        graph = self.store.snapshot()
        logger.info("Found %d dependencies", len(graph.edges))

        report.node_count = len(graph.nodes)
        report.edge_count = len(graph.edges)
        report.elapsed_seconds = time.perf_counter() - started
        return graph

    def _run_phase(self, phase: str, files: Sequence[str], task: Callable[[str], None]) -> None:
        gate = threading.BoundedSemaphore(self.max_workers)
        futures: list[Future] = []

        def guarded(path: str) -> None:
            try:
                task(path)
            except OSError as exc:
                logger.warning("Skipping %s during %s scan: %s", path, phase, exc)
                self._record_skip(path)
            except Exception:
                logger.exception("Unexpected failure scanning %s during %s scan", path, phase)
                self._record_skip(path)
            finally:
                gate.release()

        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix=f"constgraph-{phase}"
        ) as executor:
            for path in files:
                gate.acquire()
                try:
                    futures.append(executor.submit(guarded, path))
                except BaseException:
                    gate.release()
                    raise
            wait(futures)

    def _find_constants(self, path: str) -> None:
        content = read_source(path)
        self.store.add_nodes(extract_constants(content, path))

    def _record_skip(self, path: str) -> None:
        with self._report_lock:
            if self.last_report is not None and path not in self.last_report.skipped:
                self.last_report.skipped.append(path)
