import re
from typing import Any, Dict

from tfgraph.errors import TreeShapeError
from tfgraph.extract.dependencies import serialize_inputs
from tfgraph.models.resource import OutputBinding, Resource

# like the dependency pattern, but any attribute tail (certificate_authority[0].data) is accepted
OUTPUT_REFERENCE_RE = re.compile(r"\$\{(\w+)\.(\w+)(?:\[\d+\])?\.[^}]*\}", re.ASCII)


def bind_outputs(tree: Dict[str, Any], resources_by_id: Dict[str, Resource], origin: str = "") -> None:
    """
    Attach each output block to every resource its value references.

    Mutates ``Resource.outputs`` in place. References to unknown resources
    (variables, data sources, other modules) are ignored.
    """
    section = tree.get("output")
    if section is None:
        return
    if not isinstance(section, dict):
        raise TreeShapeError(origin, "output", "must be a mapping of output name to body")

    for output_name, output_config in section.items():
        if not isinstance(output_config, dict):
            raise TreeShapeError(origin, "output", f"body of '{output_name}' must be a mapping")
        value = output_config.get("value")
        if value is None:
            continue

        text = serialize_inputs(value)
        for kind, name in OUTPUT_REFERENCE_RE.findall(text):
            resource = resources_by_id.get(f"{kind}.{name}")
            if resource is None:
                continue
            resource.outputs[output_name] = OutputBinding(
                value=value,
                description=output_config.get("description") or "",
            )
