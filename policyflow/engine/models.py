from typing import List, Optional, Tuple
from pydantic import BaseModel, Field, field_validator, model_validator
from enum import Enum, IntEnum
import uuid
from datetime import datetime

from .exceptions import GraphStructureError, NodeNotFoundError


def _new_id() -> str:
    return uuid.uuid4().hex


class Outcome(IntEnum):
    """Binary result of one step; FAILURE halts the traversal."""
    FAILURE = 0
    SUCCESS = 1


class RunStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    HALTED = "halted"


class NodeStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class Node(BaseModel):
    """A single workflow step"""
    id: str = Field(default_factory=_new_id, frozen=True)
    label: str
    is_custom: bool = False
    code: Optional[str] = None
    is_entry: bool = False
    executed: bool = False

    @field_validator("label")
    @classmethod
    def _label_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Node label must not be empty")
        return value

    @model_validator(mode="after")
    def _code_only_on_custom(self) -> "Node":
        if self.code and not self.is_custom:
            raise ValueError(f"Node '{self.label}' carries code but is not a custom step")
        return self


class Edge(BaseModel):
    """Directed link between two nodes"""
    id: str = Field(default_factory=_new_id, frozen=True)
    source: str
    target: str


class WorkflowGraph(BaseModel):
    """
    Nodes and edges of one workflow, plus the execution flags written by the engine.

    Both lists keep insertion order; the engine relies on it to pick the
    outgoing edge of a node.
    """
    name: str = "Untitled workflow"
    nodes: List[Node] = []
    edges: List[Edge] = []

    @model_validator(mode="after")
    def _check_structure(self) -> "WorkflowGraph":
        seen = set()
        for node in self.nodes:
            if node.id in seen:
                raise GraphStructureError(f"Duplicate node id '{node.id}'")
            seen.add(node.id)
        if sum(1 for node in self.nodes if node.is_entry) > 1:
            raise GraphStructureError("A workflow can only have one entry node")
        return self

    # Lookups

    def find_node_by_label(self, label: str) -> Optional[Node]:
        return next((n for n in self.nodes if n.label == label), None)

    def find_node_by_id(self, node_id: str) -> Optional[Node]:
        return next((n for n in self.nodes if n.id == node_id), None)

    def outgoing_edges(self, node_id: str) -> List[Edge]:
        return [e for e in self.edges if e.source == node_id]

    def outgoing_edge(self, node_id: str) -> Optional[Edge]:
        """First edge, by insertion order, leaving ``node_id``."""
        return next((e for e in self.edges if e.source == node_id), None)

    def entry_node(self, entry_label: str = "Start") -> Optional[Node]:
        """
        Node where execution begins.

        An explicit ``is_entry`` flag wins; otherwise the first node labelled
        with the reserved start label is used.
        """
        flagged = next((n for n in self.nodes if n.is_entry), None)
        if flagged:
            return flagged
        return self.find_node_by_label(entry_label)

    # Execution state

    def set_executed(self, node_id: str, value: bool = True) -> None:
        node = self.find_node_by_id(node_id)
        if not node:
            raise NodeNotFoundError(f"Node {node_id} not found in graph")
        node.executed = value

    def reset_execution(self) -> None:
        for node in self.nodes:
            node.executed = False

    def executed_nodes(self) -> List[Node]:
        return [n for n in self.nodes if n.executed]

    # Editor operations

    def add_node(self, node: Node) -> Node:
        if self.find_node_by_id(node.id):
            raise GraphStructureError(f"Duplicate node id '{node.id}'")
        if node.is_entry and any(n.is_entry for n in self.nodes):
            raise GraphStructureError("A workflow can only have one entry node")
        self.nodes.append(node)
        return node

    def add_step(self, label: str, is_entry: bool = False) -> Node:
        """Add a built-in step dispatched by its label."""
        return self.add_node(Node(label=label, is_entry=is_entry))

    def add_custom_step(self, label: str, code: str) -> Node:
        return self.add_node(Node(label=label, is_custom=True, code=code))

    def connect(self, source: str, target: str) -> Edge:
        for node_id in (source, target):
            if not self.find_node_by_id(node_id):
                raise NodeNotFoundError(f"Node {node_id} not found in graph")
        edge = Edge(source=source, target=target)
        self.edges.append(edge)
        return edge

    def remove_node(self, node_id: str) -> None:
        """Delete a node together with every edge touching it."""
        node = self.find_node_by_id(node_id)
        if not node:
            raise NodeNotFoundError(f"Node {node_id} not found in graph")
        self.nodes.remove(node)
        self.edges = [e for e in self.edges if node_id not in (e.source, e.target)]

    def remove_edge(self, edge_id: str) -> None:
        remaining = [e for e in self.edges if e.id != edge_id]
        if len(remaining) == len(self.edges):
            raise GraphStructureError(f"Edge {edge_id} not found in graph")
        self.edges = remaining


class Diagnostic(BaseModel):
    """(label, outcome) record for one visited node"""
    node_id: str
    label: str
    outcome: Outcome


class ExecutionLog(BaseModel):
    """Log entry for workflow execution"""
    timestamp: datetime
    node_id: Optional[str] = None
    label: str
    status: NodeStatus
    message: str


class WorkflowRun(BaseModel):
    """Result of one pass over a workflow graph"""
    run_id: str
    graph_id: Optional[str] = None
    status: RunStatus
    current_node: Optional[str] = None
    diagnostics: List[Diagnostic] = []
    logs: List[ExecutionLog] = []
    halt_reason: Optional[str] = None
    created_at: datetime
    completed_at: Optional[datetime] = None

    @classmethod
    def create(cls, graph_id: Optional[str] = None) -> "WorkflowRun":
        return cls(
            run_id=str(uuid.uuid4()),
            graph_id=graph_id,
            status=RunStatus.IDLE,
            created_at=datetime.now()
        )

    @property
    def steps_executed(self) -> int:
        return len(self.diagnostics)

    @property
    def succeeded(self) -> bool:
        return self.status == RunStatus.COMPLETED

    def diagnostic_pairs(self) -> List[Tuple[str, int]]:
        return [(d.label, int(d.outcome)) for d in self.diagnostics]
