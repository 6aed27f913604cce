"""
Pytest configuration and shared fixtures for the policy workflow tests.
"""
import pytest

from policyflow.engine.engine import WorkflowEngine
from policyflow.engine.evaluator import CustomStepEvaluator
from policyflow.engine.models import Node, WorkflowGraph
from policyflow.tools.registry import create_default_registry


@pytest.fixture
def registry():
    """Frozen registry with the built-in policy actions."""
    return create_default_registry()


@pytest.fixture
def open_registry():
    """Writable registry, for tests that add their own handlers."""
    return create_default_registry(freeze=False)


@pytest.fixture
def engine(registry):
    return WorkflowEngine(registry, evaluator=CustomStepEvaluator())


@pytest.fixture
def chain():
    """Build a graph whose nodes are linked in the given order."""
    def _build(*nodes: Node, name: str = "test") -> WorkflowGraph:
        graph = WorkflowGraph(name=name)
        for node in nodes:
            graph.add_node(node)
        for current, following in zip(nodes, nodes[1:]):
            graph.connect(current.id, following.id)
        return graph
    return _build


@pytest.fixture
def start_node():
    return Node(id="start", label="Start")
