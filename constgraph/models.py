"""Lightweight data models for extracted constants and their graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


KIND_STRING = "string"
KIND_NUMBER = "number"
KIND_BOOLEAN = "boolean"
KIND_OBJECT = "object"
KIND_ARRAY = "array"
KIND_UNKNOWN = "unknown"

OBJECT_SENTINEL = "object"


@dataclass(frozen=True)
class ConstantRecord:
    name: str
    value: str
    kind: str
    file_path: str
    line_number: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "type": self.kind,
            "filePath": self.file_path,
            "lineNum": self.line_number,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ConstantRecord":
        return cls(
            name=payload["name"],
            value=payload.get("value", ""),
            kind=payload.get("type", KIND_UNKNOWN),
            file_path=payload.get("filePath", ""),
            line_number=int(payload.get("lineNum", 0)),
        )


@dataclass(frozen=True)
class DependencyEdge:
    source: str
    target: str
    file_path: str | None = None  # declaring file of both endpoints

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"source": self.source, "target": self.target}
        if self.file_path is not None:
            data["filePath"] = self.file_path
        return data

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "DependencyEdge":
        return cls(
            source=payload["source"],
            target=payload["target"],
            file_path=payload.get("filePath"),
        )


@dataclass
class DependencyGraph:
    nodes: list[ConstantRecord] = field(default_factory=list)
    edges: list[DependencyEdge] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.nodes and not self.edges

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "DependencyGraph":
        return cls(
            nodes=[ConstantRecord.from_dict(item) for item in payload.get("nodes", [])],
            edges=[DependencyEdge.from_dict(item) for item in payload.get("edges", [])],
        )


@dataclass
class FileNode:
    name: str
    path: str
    is_dir: bool
    children: list["FileNode"] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "path": self.path,
            "isDir": self.is_dir,
        }
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data
