"""
Document exporters for workflow graphs
"""

from .xml_export import build_xml_tree, export_xml

__all__ = ["build_xml_tree", "export_xml"]
