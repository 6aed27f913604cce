"""
XML export of a workflow graph and its execution flags.
"""

import xml.etree.ElementTree as ET

from policyflow.engine.models import WorkflowGraph


def build_xml_tree(graph: WorkflowGraph) -> ET.Element:
    root = ET.Element("workflow")

    nodes_elem = ET.SubElement(root, "nodes")
    for node in graph.nodes:
        ET.SubElement(nodes_elem, "node", {
            "id": node.id,
            "label": node.label,
            "executed": "true" if node.executed else "false",
        })

    edges_elem = ET.SubElement(root, "edges")
    for edge in graph.edges:
        ET.SubElement(edges_elem, "edge", {"from": edge.source, "to": edge.target})

    return root


def export_xml(graph: WorkflowGraph) -> str:
    """Serialize nodes as (id, label, executed) and edges as (from, to)."""
    body = ET.tostring(build_xml_tree(graph), encoding="unicode")
    return '<?xml version="1.0"?>\n' + body
