from fastapi import APIRouter, HTTPException, Response
from typing import Any, Dict, List, Optional
from pydantic import BaseModel

from policyflow.core.config import settings
from policyflow.engine.engine import WorkflowEngine
from policyflow.engine.evaluator import CustomStepEvaluator
from policyflow.engine.exceptions import (
    GraphNotFoundError, NodeNotFoundError, RunInProgressError
)
from policyflow.engine.models import Node, WorkflowGraph, WorkflowRun
from policyflow.export.xml_export import export_xml
from policyflow.tools.registry import create_default_registry
from policyflow.workflows.policy_issuance import create_policy_issuance_workflow

router = APIRouter()

# Global instances - initialized once when module loads
action_registry = create_default_registry()  # Frozen table of built-in actions
engine = WorkflowEngine(
    action_registry,
    evaluator=CustomStepEvaluator(enabled=settings.custom_code_enabled),
    max_steps=settings.max_steps,
    entry_label=settings.entry_label
)


# Request/Response models
class NodeRequest(BaseModel):
    id: Optional[str] = None
    label: str
    is_custom: bool = False
    code: Optional[str] = None
    is_entry: bool = False


class EdgeRequest(BaseModel):
    source: str
    target: str


class CreateGraphRequest(BaseModel):
    name: str
    nodes: List[NodeRequest] = []
    edges: List[EdgeRequest] = []


class CreateGraphResponse(BaseModel):
    graph_id: str
    message: str


class AddStepRequest(BaseModel):
    label: str


class AddCustomStepRequest(BaseModel):
    name: str
    code: str


class RunWorkflowResponse(BaseModel):
    run_id: str
    graph_id: Optional[str] = None
    status: str
    halt_reason: Optional[str] = None
    diagnostics: List[Dict[str, Any]]
    executed_nodes: List[str]
    logs: List[Dict[str, Any]]


def _detail(error: Exception) -> str:
    # KeyError subclasses quote their message in str()
    return str(error.args[0]) if error.args else str(error)


def _require_graph(graph_id: str) -> WorkflowGraph:
    graph = engine.get_graph(graph_id)
    if not graph:
        raise HTTPException(status_code=404, detail=f"Graph {graph_id} not found")
    return graph


def _build_node(request: NodeRequest) -> Node:
    fields = request.model_dump(exclude_none=True)
    return Node(**fields)


def _diagnostics_payload(run: WorkflowRun) -> List[Dict[str, Any]]:
    return [{
        "node_id": d.node_id,
        "label": d.label,
        "outcome": int(d.outcome)
    } for d in run.diagnostics]


def _run_response(run: WorkflowRun, graph: WorkflowGraph) -> RunWorkflowResponse:
    return RunWorkflowResponse(
        run_id=run.run_id,
        graph_id=run.graph_id,
        status=run.status.value,
        halt_reason=run.halt_reason,
        diagnostics=_diagnostics_payload(run),
        executed_nodes=[n.id for n in graph.executed_nodes()],
        logs=[{
            "timestamp": log.timestamp.isoformat(),
            "node_id": log.node_id,
            "label": log.label,
            "status": log.status.value,
            "message": log.message
        } for log in run.logs]
    )


@router.post("/graphs", response_model=CreateGraphResponse)
async def create_graph(request: CreateGraphRequest):
    """
    Create a new workflow graph.

    Without nodes the graph is seeded with a single Start entry node, the way
    a blank canvas opens in the editor.
    """
    try:
        graph = WorkflowGraph(name=request.name)
        if request.nodes:
            for node_request in request.nodes:
                graph.add_node(_build_node(node_request))
        else:
            graph.add_node(Node(id="start", label=settings.entry_label, is_entry=True))

        for edge in request.edges:
            graph.connect(edge.source, edge.target)

        graph_id = engine.create_graph(graph)
        return CreateGraphResponse(
            graph_id=graph_id,
            message=f"Graph '{request.name}' created successfully"
        )

    except (ValueError, NodeNotFoundError) as e:
        raise HTTPException(status_code=400, detail=_detail(e))


@router.get("/graphs")
async def list_graphs():
    """List stored graphs with summary information."""
    return {
        "graphs": [
            {
                "graph_id": graph_id,
                "name": graph.name,
                "node_count": len(graph.nodes),
                "edge_count": len(graph.edges)
            }
            for graph_id, graph in engine.graphs.items()
        ]
    }


@router.get("/graphs/{graph_id}")
async def get_graph(graph_id: str):
    graph = _require_graph(graph_id)
    return {"graph_id": graph_id, **graph.model_dump()}


@router.post("/graphs/{graph_id}/nodes")
async def add_step(graph_id: str, request: AddStepRequest):
    """Drop a built-in step onto the graph."""
    graph = _require_graph(graph_id)
    try:
        node = graph.add_step(request.label)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=_detail(e))
    return node.model_dump()


@router.post("/graphs/{graph_id}/custom-nodes")
async def add_custom_step(graph_id: str, request: AddCustomStepRequest):
    """Create a custom step whose behaviour is the supplied Python code."""
    graph = _require_graph(graph_id)
    try:
        node = graph.add_custom_step(request.name, request.code)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=_detail(e))
    return node.model_dump()


@router.post("/graphs/{graph_id}/edges")
async def connect_nodes(graph_id: str, request: EdgeRequest):
    graph = _require_graph(graph_id)
    try:
        edge = graph.connect(request.source, request.target)
    except NodeNotFoundError as e:
        raise HTTPException(status_code=404, detail=_detail(e))
    return edge.model_dump()


@router.delete("/graphs/{graph_id}/nodes/{node_id}")
async def delete_node(graph_id: str, node_id: str):
    graph = _require_graph(graph_id)
    try:
        graph.remove_node(node_id)
    except NodeNotFoundError as e:
        raise HTTPException(status_code=404, detail=_detail(e))
    return {"message": f"Node {node_id} deleted"}


@router.post("/graphs/{graph_id}/run", response_model=RunWorkflowResponse)
def run_workflow(graph_id: str):
    """
    Run the stored graph once.

    Step failures are not HTTP errors: they come back as a ``halted`` status
    with the diagnostics recorded up to the failing step.
    Declared sync so FastAPI runs it in its threadpool, off the event loop.
    """
    try:
        run = engine.run_workflow(graph_id)
    except GraphNotFoundError as e:
        raise HTTPException(status_code=404, detail=_detail(e))
    except RunInProgressError as e:
        raise HTTPException(status_code=409, detail=_detail(e))

    return _run_response(run, engine.get_graph(graph_id))


@router.get("/runs/{run_id}")
async def get_run(run_id: str):
    run = engine.get_run(run_id)
    if not run:
        raise HTTPException(status_code=404, detail="Workflow run not found")
    return {
        "run_id": run.run_id,
        "graph_id": run.graph_id,
        "status": run.status.value,
        "halt_reason": run.halt_reason,
        "diagnostics": _diagnostics_payload(run),
        "created_at": run.created_at.isoformat(),
        "completed_at": run.completed_at.isoformat() if run.completed_at else None
    }


@router.get("/graphs/{graph_id}/export/xml")
async def export_graph_xml(graph_id: str):
    """Export nodes with their executed flags and edges as XML."""
    graph = _require_graph(graph_id)
    return Response(
        content=export_xml(graph),
        media_type="application/xml",
        headers={"Content-Disposition": 'attachment; filename="workflow.xml"'}
    )


@router.get("/actions")
async def list_actions():
    """Built-in actions grouped by palette category."""
    return {
        "actions": action_registry.list_actions(),
        "palette": action_registry.palette()
    }


@router.get("/memory/stats")
async def get_memory_stats():
    return engine.get_memory_stats()


@router.post("/demo/policy-issuance")
def demo_policy_issuance():
    """Store and run the bundled policy issuance workflow"""
    graph = create_policy_issuance_workflow()
    graph_id = engine.create_graph(graph)

    try:
        run = engine.run_workflow(graph_id)
    except RunInProgressError as e:
        raise HTTPException(status_code=409, detail=_detail(e))

    return _run_response(run, graph)
