from __future__ import annotations

import threading
import time

from constgraph.models import ConstantRecord, DependencyEdge, DependencyGraph
from constgraph.store import GraphStore, ReadWriteLock


def _record(name: str, path: str = "a.js", line: int = 1) -> ConstantRecord:
    return ConstantRecord(name, "1", "number", path, line)


def test_empty_store_snapshot_is_empty_graph():
    graph = GraphStore().snapshot()

    assert graph.is_empty()
    assert graph.to_dict() == {"nodes": [], "edges": []}


def test_snapshot_is_a_copy():
    store = GraphStore()
    store.add_node(_record("A"))
    snapshot = store.snapshot()

    store.add_nodes([_record("B")])
    store.add_edges([DependencyEdge("B", "A", "a.js")])

    assert [node.name for node in snapshot.nodes] == ["A"]
    assert snapshot.edges == []
    assert store.counts() == (2, 1)


def test_replace_and_clear():
    store = GraphStore()
    store.add_node(_record("OLD"))
    store.replace(DependencyGraph(nodes=[_record("NEW")], edges=[]))

    assert {node.name for node in store.snapshot().nodes} == {"NEW"}

    store.clear()
    assert store.counts() == (0, 0)


def test_concurrent_writers_lose_nothing():
    store = GraphStore()

    def writer(offset: int) -> None:
        for idx in range(200):
            store.add_node(_record(f"C{offset}_{idx}"))

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert store.counts() == (1600, 0)


def test_readers_share_the_lock_and_writers_wait():
    lock = ReadWriteLock()
    events: list[str] = []
    readers_in = threading.Barrier(2, timeout=5)
    both_in = threading.Event()

    def reader() -> None:
        with lock.read():
            readers_in.wait()
            both_in.set()
            time.sleep(0.05)
            events.append("read")

    def writer() -> None:
        with lock.write():
            events.append("write")

    readers = [threading.Thread(target=reader) for _ in range(2)]
    for thread in readers:
        thread.start()
    assert both_in.wait(timeout=5)
    write_thread = threading.Thread(target=writer)
    write_thread.start()

    for thread in readers:
        thread.join(timeout=5)
    write_thread.join(timeout=5)

    assert events == ["read", "read", "write"]
