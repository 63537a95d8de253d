"""
Consolidation components: scope handling, deduplication, graph finalization and export.
"""

from .scope_classifier import ScopeClassifier
from .scope_merger import ScopeMerger, MERGE_TABLE, merge_scopes
from .component_registry import ComponentRegistry
from .dependency_graph import DependencyGraphBuilder
from .graph_finalizer import GraphFinalizer, FinalizedGraph
from .export_manager import ExportManager

__all__ = [
    "ScopeClassifier",
    "ScopeMerger",
    "MERGE_TABLE",
    "merge_scopes",
    "ComponentRegistry",
    "DependencyGraphBuilder",
    "GraphFinalizer",
    "FinalizedGraph",
    "ExportManager"
]
