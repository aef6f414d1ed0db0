from typing import Dict, Iterable, List, Optional

from rich.console import Console

from tfgraph.categories import CategoryClassifier
from tfgraph.extract.dependencies import resolve_dependencies
from tfgraph.extract.outputs import bind_outputs
from tfgraph.extract.resources import build_resources
from tfgraph.models.graph import Dependency, DiagramGraph
from tfgraph.models.resource import Resource
from tfgraph.parsers.terraform import ParsedFile

console = Console(stderr=True)


def assemble(resources: Iterable[Resource], dependencies: Iterable[Dependency]) -> DiagramGraph:
    return DiagramGraph(resources=tuple(resources), dependencies=tuple(dependencies))


def merge_resources(
    parsed_files: List[ParsedFile],
    classifier: Optional[CategoryClassifier] = None,
) -> Dict[str, Resource]:
    """
    Build resources from every file, keyed by ``kind.name``.
    A later declaration replaces an earlier one but keeps its position.
    """
    merged: Dict[str, Resource] = {}
    for pf in parsed_files:
        for r in build_resources(pf.tree, pf.path, classifier):
            previous = merged.get(r.id)
            if previous is not None:
                console.print(
                    f"[yellow]Warning:[/yellow] {r.id} declared in {previous.origin} "
                    f"is redeclared in {r.origin}; keeping the later one."
                )
            merged[r.id] = r
    return merged


def run(
    parsed_files: List[ParsedFile],
    classifier: Optional[CategoryClassifier] = None,
) -> DiagramGraph:
    """
    One extraction run: resources, then outputs, then dependencies.
    Every tree is parsed once by the caller and reused for both passes.
    """
    by_id = merge_resources(parsed_files, classifier)

    for pf in parsed_files:
        bind_outputs(pf.tree, by_id, pf.path)

    resources = list(by_id.values())
    return assemble(resources, resolve_dependencies(resources))
