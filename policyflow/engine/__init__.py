"""
Core workflow engine components

This module contains the graph model, the custom step evaluator and the
execution engine.
"""

from .engine import WorkflowEngine
from .evaluator import CustomStepEvaluator
from .exceptions import (
    WorkflowError,
    GraphStructureError,
    NodeNotFoundError,
    GraphNotFoundError,
    RunInProgressError,
    RegistryFrozenError
)
from .models import (
    Node,
    Edge,
    WorkflowGraph,
    Outcome,
    RunStatus,
    NodeStatus,
    Diagnostic,
    ExecutionLog,
    WorkflowRun
)

__all__ = [
    "WorkflowEngine",
    "CustomStepEvaluator",
    "WorkflowError",
    "GraphStructureError",
    "NodeNotFoundError",
    "GraphNotFoundError",
    "RunInProgressError",
    "RegistryFrozenError",
    "Node",
    "Edge",
    "WorkflowGraph",
    "Outcome",
    "RunStatus",
    "NodeStatus",
    "Diagnostic",
    "ExecutionLog",
    "WorkflowRun"
]
