from __future__ import annotations

import threading
import time
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from constgraph import builder as builder_module
from constgraph.builder import GraphBuilder
from constgraph.store import GraphStore


def _write(root: Path, name: str, content: str) -> str:
    path = root / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return str(path)


def _edge_set(graph):
    return {(edge.source, edge.target, edge.file_path) for edge in graph.edges}


def _node_set(graph):
    return {
        (node.name, node.value, node.kind, node.file_path, node.line_number)
        for node in graph.nodes
    }


def test_build_single_file_scenario():
    with TemporaryDirectory() as tmpdir:
        path = _write(Path(tmpdir), "a.js", 'const BASE="x";\nconst FULL=BASE+"y";\n')
        store = GraphStore()
        graph = GraphBuilder(store).build([path])

    nodes = {node.name: node for node in graph.nodes}
    assert set(nodes) == {"BASE", "FULL"}
    assert nodes["BASE"].kind == "string"
    assert nodes["BASE"].value == '"x"'
    assert nodes["FULL"].value == 'BASE+"y"'
    assert [(edge.source, edge.target) for edge in graph.edges] == [("FULL", "BASE")]
    assert store.counts() == (2, 1)


def test_build_two_files_with_shared_names():
    with TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        first = _write(root, "one.js", 'const SHARED = "v";\nconst LOCAL_ONE = SHARED + "1";\n')
        second = _write(root, "two.js", 'const SHARED = "v";\nconst LOCAL_TWO = SHARED + "2";\n')
        graph = GraphBuilder(GraphStore()).build([first, second])

    assert len(graph.nodes) == 4
    assert _edge_set(graph) == {
        ("LOCAL_ONE", "SHARED", first),
        ("LOCAL_TWO", "SHARED", second),
    }


def test_missing_file_is_skipped():
    with TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        present = _write(root, "ok.js", "const OK = 1;\nconst ALSO = OK;\n")
        missing = str(root / "missing.js")
        builder = GraphBuilder(GraphStore())
        graph = builder.build([missing, present])

    assert {node.name for node in graph.nodes} == {"OK", "ALSO"}
    assert len(graph.edges) == 1
    assert builder.last_report is not None
    assert builder.last_report.skipped == [missing]
    assert builder.last_report.file_count == 2


def test_unexpected_task_failure_does_not_abort_siblings(monkeypatch: pytest.MonkeyPatch):
    real_extract = builder_module.extract_constants

    def flaky_extract(content: str, file_path: str):
        if file_path.endswith("bad.js"):
            raise ValueError("boom")
        return real_extract(content, file_path)

    monkeypatch.setattr(builder_module, "extract_constants", flaky_extract)

    with TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        files = [
            _write(root, "bad.js", "const BAD = 1;\n"),
            _write(root, "good.js", "const GOOD = 1;\n"),
        ]
        graph = GraphBuilder(GraphStore()).build(files)

    assert {node.name for node in graph.nodes} == {"GOOD"}


def test_admission_gate_bounds_in_flight_scans(monkeypatch: pytest.MonkeyPatch):
    real_extract = builder_module.extract_constants
    lock = threading.Lock()
    state = {"active": 0, "peak": 0}

    def slow_extract(content: str, file_path: str):
        with lock:
            state["active"] += 1
            state["peak"] = max(state["peak"], state["active"])
        time.sleep(0.01)
        with lock:
            state["active"] -= 1
        return real_extract(content, file_path)

    monkeypatch.setattr(builder_module, "extract_constants", slow_extract)

    with TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        files = [_write(root, f"f{idx}.js", f"const C{idx} = {idx};\n") for idx in range(20)]
        graph = GraphBuilder(GraphStore(), max_workers=3).build(files)

    assert len(graph.nodes) == 20
    assert 1 <= state["peak"] <= 3


def test_extraction_phase_completes_before_inference(monkeypatch: pytest.MonkeyPatch):
    real_extract = builder_module.extract_constants
    real_infer = builder_module.infer_dependencies
    events: list[str] = []
    lock = threading.Lock()

    def recording_extract(content: str, file_path: str):
        time.sleep(0.005)
        with lock:
            events.append("extract")
        return real_extract(content, file_path)

    def recording_infer(constants, file_path=None):
        with lock:
            events.append("infer")
        return real_infer(constants, file_path=file_path)

    monkeypatch.setattr(builder_module, "extract_constants", recording_extract)
    monkeypatch.setattr(builder_module, "infer_dependencies", recording_infer)

    with TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        files = [_write(root, f"f{idx}.js", "const A = 1;\nconst B = A;\n") for idx in range(12)]
        GraphBuilder(GraphStore(), max_workers=4).build(files)

    assert events == ["extract"] * 12 + ["infer"] * 12


def test_rebuild_is_idempotent_on_sets():
    with TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        files = [
            _write(root, f"mod{idx}.ts", f"export const BASE{idx} = 'b';\nconst FULL{idx} = BASE{idx} + 'x';\n")
            for idx in range(15)
        ]
        first = GraphBuilder(GraphStore()).build(files)
        second = GraphBuilder(GraphStore()).build(files)

    assert _node_set(first) == _node_set(second)
    assert _edge_set(first) == _edge_set(second)
    assert len(first.edges) == 15


def test_rejects_non_positive_worker_count():
    with pytest.raises(ValueError):
        GraphBuilder(GraphStore(), max_workers=0)
