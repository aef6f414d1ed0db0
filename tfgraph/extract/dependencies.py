"""
Dependency resolution: find ``${kind.name.attr}`` references inside each
resource's inputs and turn them into deduplicated, ordered edges.
"""
import json
import re
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

from tfgraph.models.graph import Dependency, Reference
from tfgraph.models.resource import Resource

# ${aws_vpc.main.id} or ${aws_subnet.public[0].id}; the subscript is ignored
REFERENCE_RE = re.compile(r"\$\{(\w+)\.(\w+)(?:\[\d+\])?\.(\w+)\}", re.ASCII)


def serialize_inputs(inputs: Any) -> str:
    """Stable text form of a config tree; string values appear verbatim."""
    return json.dumps(inputs, sort_keys=True, ensure_ascii=False)


def iter_references(text: str) -> Iterator[Tuple[str, str, str, str]]:
    """Yield (kind, name, attribute, raw_expression) for every match, left to right."""
    for m in REFERENCE_RE.finditer(text):
        yield m.group(1), m.group(2), m.group(3), m.group(0)


def _join(parent: str, key: Any) -> str:
    return f"{parent}.{key}" if parent else str(key)


def find_property_path(value: Any, needle: str, parent: str = "") -> Optional[str]:
    """
    Depth-first search for the first scalar string containing *needle*.

    Returns its dotted path (list positions become numeric segments), or
    None when no single string holds the whole expression.
    """
    if isinstance(value, str):
        return parent if needle in value else None
    if value is None or isinstance(value, (bool, int, float)):
        return None
    if isinstance(value, dict):
        for key, child in value.items():
            found = find_property_path(child, needle, _join(parent, key))
            if found:
                return found
        return None
    if isinstance(value, list):
        for index, child in enumerate(value):
            found = find_property_path(child, needle, _join(parent, index))
            if found:
                return found
        return None
    raise TypeError(f"unsupported config value at '{parent or '<root>'}': {type(value).__name__}")


def check_shape(value: Any, parent: str = "") -> None:
    """Raise TypeError naming the path of any value outside str/number/bool/None/dict/list."""
    if value is None or isinstance(value, (str, bool, int, float)):
        return
    if isinstance(value, dict):
        for key, child in value.items():
            check_shape(child, _join(parent, key))
        return
    if isinstance(value, list):
        for index, child in enumerate(value):
            check_shape(child, _join(parent, index))
        return
    raise TypeError(f"unsupported config value at '{parent or '<root>'}': {type(value).__name__}")


def scan_resource(resource: Resource, known_ids: Set[str]) -> List[Tuple[str, Reference]]:
    """
    Return (target_id, Reference) pairs for one resource, in discovery order.

    Self-references and references to resources outside *known_ids* are dropped.
    """
    found: List[Tuple[str, Reference]] = []
    check_shape(resource.inputs)
    text = serialize_inputs(resource.inputs)

    for kind, name, attribute, raw in iter_references(text):
        target_id = f"{kind}.{name}"
        if target_id == resource.id:
            continue
        if target_id not in known_ids:
            continue
        path = find_property_path(resource.inputs, raw) or ""
        found.append((target_id, Reference(
            source_property=path,
            target_attribute=attribute,
            raw_expression=raw,
        )))

    return found


def resolve_dependencies(resources: List[Resource]) -> List[Dependency]:
    """
    Build one Dependency per (source, target) pair in first-discovery order.
    Later references between the same pair are appended to that record.
    """
    known_ids = {r.id for r in resources}
    by_pair: Dict[Tuple[str, str], Dependency] = {}
    dependencies: List[Dependency] = []

    for resource in resources:
        for target_id, ref in scan_resource(resource, known_ids):
            key = (resource.id, target_id)
            dep = by_pair.get(key)
            if dep is None:
                dep = Dependency(source=resource.id, target=target_id)
                by_pair[key] = dep
                dependencies.append(dep)
            dep.references.append(ref)

    return dependencies
