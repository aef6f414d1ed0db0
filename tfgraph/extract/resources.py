from typing import Any, Dict, List, Optional

from tfgraph.categories import DEFAULT_CLASSIFIER, CategoryClassifier
from tfgraph.errors import TreeShapeError
from tfgraph.models.resource import Resource


def _instance_config(wrapped: Any, origin: str, kind: str, name: str) -> Dict[str, Any]:
    """
    The parser wraps each instance body in a single-element list.
    Terraform JSON syntax hands over the mapping directly; accept both.
    """
    config = wrapped
    if isinstance(wrapped, list):
        if not wrapped:
            raise TreeShapeError(origin, "resource", f"has an empty body for {kind}.{name}")
        config = wrapped[0]
    if not isinstance(config, dict):
        raise TreeShapeError(
            origin, "resource", f"body of {kind}.{name} is {type(config).__name__}, not a mapping"
        )
    return config


def build_resources(
    tree: Dict[str, Any],
    origin: str,
    classifier: Optional[CategoryClassifier] = None,
) -> List[Resource]:
    """Build one Resource per declared (kind, name) in the tree's resource section."""
    classifier = classifier or DEFAULT_CLASSIFIER
    resources: List[Resource] = []

    section = tree.get("resource")
    if section is None:
        return resources
    if not isinstance(section, dict):
        raise TreeShapeError(origin, "resource", "must be a mapping of kind to instances")

    for kind, instances in section.items():
        if not isinstance(instances, dict):
            raise TreeShapeError(origin, "resource", f"entry '{kind}' must be a mapping of name to body")
        for name, wrapped in instances.items():
            resources.append(Resource(
                kind=kind,
                name=name,
                category=classifier.classify(kind),
                inputs=_instance_config(wrapped, origin, kind, name),
                outputs={},
                origin=origin,
            ))

    return resources
