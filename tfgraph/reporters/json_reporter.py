"""
JSON diagram payload, the format consumed by the visualizer.
"""
import json

from tfgraph.models.graph import DiagramGraph


def build_report(graph: DiagramGraph) -> str:
    return json.dumps(graph.to_dict(), indent=2)
