from typing import TYPE_CHECKING, Any, Dict, Optional
from datetime import datetime
import logging
import threading

from .evaluator import CustomStepEvaluator
from .exceptions import GraphNotFoundError, RunInProgressError
from .models import (
    Diagnostic, ExecutionLog, Node, NodeStatus, Outcome, RunStatus,
    WorkflowGraph, WorkflowRun
)

if TYPE_CHECKING:
    from policyflow.tools.registry import ActionRegistry

logger = logging.getLogger(__name__)


class WorkflowEngine:
    """Core workflow execution engine"""

    def __init__(
        self,
        registry: "ActionRegistry",
        evaluator: Optional[CustomStepEvaluator] = None,
        max_steps: int = 1000,
        entry_label: str = "Start",
    ):
        """
        Bind the engine to its action registry and custom step evaluator.

        The registry is read, never written. ``max_steps`` bounds the number of
        steps one run may visit so a cyclic graph cannot loop forever.
        """
        if max_steps < 1:
            raise ValueError("max_steps must be at least 1")
        self.registry = registry
        self.evaluator = evaluator or CustomStepEvaluator()
        self.max_steps = max_steps
        self.entry_label = entry_label
        self.status = RunStatus.IDLE
        self._run_lock = threading.Lock()  # One run in flight per engine
        self.graphs: Dict[str, WorkflowGraph] = {}  # Graphs by ID, process-local only
        self.runs: Dict[str, WorkflowRun] = {}  # Completed runs by ID

    def create_graph(self, graph: WorkflowGraph) -> str:
        """Store a workflow graph and return its ID."""
        graph_id = f"graph_{len(self.graphs) + 1}"
        self.graphs[graph_id] = graph
        return graph_id

    def get_graph(self, graph_id: str) -> Optional[WorkflowGraph]:
        return self.graphs.get(graph_id)

    def get_run(self, run_id: str) -> Optional[WorkflowRun]:
        return self.runs.get(run_id)

    def run_workflow(self, graph_id: str) -> WorkflowRun:
        """Run trigger for a stored graph."""
        graph = self.get_graph(graph_id)
        if not graph:
            raise GraphNotFoundError(f"Graph {graph_id} not found")
        return self.execute(graph, graph_id=graph_id)

    def execute(self, graph: WorkflowGraph, graph_id: Optional[str] = None) -> WorkflowRun:
        """
        Execute a graph once, from its entry node to a dead end or the first failure.

        Every ``executed`` flag is cleared before the first step. Step failures
        never raise: they end the run in ``HALTED`` and show up in the
        diagnostics. A second call while a run is in flight, from this thread
        or another one, raises ``RunInProgressError``.
        """
        if not self._run_lock.acquire(blocking=False):
            raise RunInProgressError("A workflow run is already in progress")

        try:
            run = WorkflowRun.create(graph_id)
            self.status = run.status = RunStatus.RUNNING
            logger.info(f"[{run.run_id}] === WORKFLOW START === ({graph.name})")

            graph.reset_execution()
            self._traverse(run, graph)
        finally:
            self.status = RunStatus.IDLE
            self._run_lock.release()

        run.current_node = None
        run.completed_at = datetime.now()
        self.runs[run.run_id] = run
        logger.info(f"[{run.run_id}] === WORKFLOW END === status={run.status.value} steps={run.steps_executed}")
        return run

    def _traverse(self, run: WorkflowRun, graph: WorkflowGraph) -> None:
        """
        State machine loop: current node -> outcome -> mark -> record -> next edge.
        """
        current = graph.entry_node(self.entry_label)
        if not current:
            logger.warning(f"[{run.run_id}] No entry node, nothing to execute")
            run.status = RunStatus.COMPLETED
            return

        while current:
            if run.steps_executed >= self.max_steps:
                logger.warning(f"[{run.run_id}] Step limit of {self.max_steps} reached, possible cycle")
                run.status = RunStatus.HALTED
                run.halt_reason = "step_limit"
                return

            run.current_node = current.id
            self._add_log(run, current, NodeStatus.RUNNING, f"Executing {current.label}")

            outcome = self._execute_node(current)

            graph.set_executed(current.id, True)
            run.diagnostics.append(Diagnostic(node_id=current.id, label=current.label, outcome=outcome))
            logger.info(f"[{run.run_id}] {current.label} → {int(outcome)}")

            if outcome == Outcome.FAILURE:
                self._add_log(run, current, NodeStatus.FAILED, f"{current.label} failed, halting")
                run.status = RunStatus.HALTED
                run.halt_reason = "step_failed"
                return

            self._add_log(run, current, NodeStatus.COMPLETED, f"{current.label} completed")
            current = self._get_next_node(run, graph, current)

        run.status = RunStatus.COMPLETED

    def _execute_node(self, node: Node) -> Outcome:
        """
        Determine one node's outcome.

        Custom steps go to the evaluator; built-in steps are looked up by
        label. Unknown labels, handlers that raise and return values other
        than 1 all count as failure.
        """
        if node.is_custom:
            return self.evaluator.evaluate(node.code, label=node.label)

        func = self.registry.get(node.label)
        if not func:
            logger.warning(f"No action registered for '{node.label}'")
            return Outcome.FAILURE

        try:
            result = func()
        except KeyboardInterrupt:
            raise
        except BaseException as e:
            logger.error(f"Action '{node.label}' raised {type(e).__name__}: {e}")
            return Outcome.FAILURE

        return Outcome.SUCCESS if result == Outcome.SUCCESS else Outcome.FAILURE

    def _get_next_node(self, run: WorkflowRun, graph: WorkflowGraph, node: Node) -> Optional[Node]:
        """Follow the first outgoing edge; None ends the run successfully."""
        edges = graph.outgoing_edges(node.id)
        if not edges:
            return None
        if len(edges) > 1:
            logger.warning(
                f"[{run.run_id}] {node.label} has {len(edges)} outgoing edges, following the first"
            )

        target = graph.find_node_by_id(edges[0].target)
        if not target:
            logger.warning(f"[{run.run_id}] Edge from {node.label} points to missing node {edges[0].target}")
        return target

    def _add_log(self, run: WorkflowRun, node: Node, status: NodeStatus, message: str) -> None:
        run.logs.append(ExecutionLog(
            timestamp=datetime.now(),
            node_id=node.id,
            label=node.label,
            status=status,
            message=message
        ))

    def get_memory_stats(self) -> Dict[str, Any]:
        """Counts of objects held by this engine, for monitoring."""
        return {
            "graphs": len(self.graphs),
            "runs": len(self.runs),
            "actions": len(self.registry.list_actions()),
            "total_logs": sum(len(run.logs) for run in self.runs.values())
        }
