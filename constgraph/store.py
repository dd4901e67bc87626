"""Thread-safe owner of the shared dependency graph."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterable, Iterator

from .models import ConstantRecord, DependencyEdge, DependencyGraph


class ReadWriteLock:
    """Many concurrent readers or a single writer.

    A waiting writer blocks new readers so that a rebuild swapping in a new
    graph is not starved by steady query traffic.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class GraphStore:
    def __init__(self, graph: DependencyGraph | None = None) -> None:
        self._lock = ReadWriteLock()
        self._nodes: list[ConstantRecord] = list(graph.nodes) if graph else []
        self._edges: list[DependencyEdge] = list(graph.edges) if graph else []

    def add_node(self, record: ConstantRecord) -> None:
        with self._lock.write():
            self._nodes.append(record)

    def add_nodes(self, records: Iterable[ConstantRecord]) -> None:
        records = list(records)
        if not records:
            return
        with self._lock.write():
            self._nodes.extend(records)

    def add_edges(self, edges: Iterable[DependencyEdge]) -> None:
        edges = list(edges)
        if not edges:
            return
        with self._lock.write():
            self._edges.extend(edges)

    def snapshot(self) -> DependencyGraph:
        with self._lock.read():
            return DependencyGraph(nodes=list(self._nodes), edges=list(self._edges))

    def replace(self, graph: DependencyGraph) -> None:
        nodes = list(graph.nodes)
        edges = list(graph.edges)
        with self._lock.write():
            self._nodes = nodes
            self._edges = edges

    def clear(self) -> None:
        with self._lock.write():
            self._nodes = []
            self._edges = []

    def counts(self) -> tuple[int, int]:
        with self._lock.read():
            return len(self._nodes), len(self._edges)
