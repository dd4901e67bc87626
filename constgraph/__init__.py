"""Constant dependency graph core modules."""

from .builder import GraphBuilder
from .dependencies import infer_dependencies
from .extract import extract_constants
from .file_walker import build_file_tree, iter_script_files
from .ignore import IgnoreRules
from .models import ConstantRecord, DependencyEdge, DependencyGraph, FileNode
from .query import query_subgraph
from .service import DependencyService
from .storage import load_graph, save_graph
from .store import GraphStore

__all__ = [
    "ConstantRecord",
    "DependencyEdge",
    "DependencyGraph",
    "FileNode",
    "GraphBuilder",
    "GraphStore",
    "DependencyService",
    "IgnoreRules",
    "extract_constants",
    "infer_dependencies",
    "iter_script_files",
    "build_file_tree",
    "query_subgraph",
    "load_graph",
    "save_graph",
]
