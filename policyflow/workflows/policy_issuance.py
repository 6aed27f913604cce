from policyflow.engine.models import Node, Edge, WorkflowGraph


POLICY_ISSUANCE_STEPS = [
    "Start",
    "Validate Policy",
    "Execute Underwriting Rule",
    "Invoke Rating Engine",
    "Call Payment Gateway",
    "Update Policy Status",
    "Persist Data",
    "Emit Event",
    "Send Notification",
]


def create_policy_issuance_workflow() -> WorkflowGraph:
    """Create the linear policy issuance workflow"""

    nodes = [
        Node(label=label, is_entry=(label == "Start"))
        for label in POLICY_ISSUANCE_STEPS
    ]

    # Chain every step to the next one
    edges = [
        Edge(source=current.id, target=following.id)
        for current, following in zip(nodes, nodes[1:])
    ]

    return WorkflowGraph(
        name="Policy Issuance",
        nodes=nodes,
        edges=edges
    )
