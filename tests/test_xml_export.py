"""
Tests for the XML exporter.
"""
import xml.etree.ElementTree as ET

from policyflow.engine.models import Node, WorkflowGraph
from policyflow.export.xml_export import export_xml


def _parse(document: str) -> ET.Element:
    return ET.fromstring(document.split("\n", 1)[1])


class TestExportXml:
    """Exported document mirrors the graph state."""

    def test_fresh_graph_exports_unexecuted(self, chain, start_node):
        graph = chain(start_node, Node(id="a", label="Persist Data"))

        document = export_xml(graph)
        root = _parse(document)

        assert document.startswith('<?xml version="1.0"?>\n<workflow>')
        assert [(n.get("id"), n.get("label"), n.get("executed")) for n in root.iter("node")] == [
            ("start", "Start", "false"),
            ("a", "Persist Data", "false"),
        ]
        assert [(e.get("from"), e.get("to")) for e in root.iter("edge")] == [("start", "a")]

    def test_reflects_last_run(self, engine, chain, start_node):
        graph = chain(start_node, Node(id="bad", label="Nope"), Node(id="tail", label="Persist Data"))
        engine.execute(graph)

        root = _parse(export_xml(graph))
        executed = {n.get("id"): n.get("executed") for n in root.iter("node")}

        assert executed == {"start": "true", "bad": "true", "tail": "false"}

    def test_labels_are_escaped(self):
        graph = WorkflowGraph(nodes=[Node(id="x", label='Check "A" & <B>')])

        root = _parse(export_xml(graph))

        assert root.find("nodes/node").get("label") == 'Check "A" & <B>'

    def test_empty_graph(self):
        root = _parse(export_xml(WorkflowGraph()))
        assert root.find("nodes") is not None
        assert list(root.find("edges")) == []
