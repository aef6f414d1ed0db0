"""
Markdown + Mermaid resource inventory and dependency diagram.
"""
import re
from collections import defaultdict
from datetime import datetime, timezone
from typing import Dict, List

from jinja2 import Environment

from tfgraph import __version__
from tfgraph.models.graph import Dependency, DiagramGraph
from tfgraph.models.resource import Category, Resource

_CATEGORY_LABELS = {
    Category.NETWORKING: "Networking",
    Category.COMPUTE:    "Compute",
    Category.CONTAINER:  "Containers",
    Category.STORAGE:    "Storage",
    Category.DATABASE:   "Databases",
    Category.ANALYTICS:  "Analytics",
    Category.SECURITY:   "Security",
    Category.OTHER:      "Other",
}


def _sanitize_node_id(name: str) -> str:
    return re.sub(r"[^a-zA-Z0-9_]", "_", name)


def _node_shape(r: Resource) -> str:
    """Return a Mermaid node definition string (without ID)."""
    label = r.id
    if r.category in (Category.STORAGE, Category.DATABASE):
        return f"[({label})]"
    if r.category == Category.NETWORKING:
        return f"{{{{{label}}}}}"
    if r.category == Category.SECURITY:
        return f"[/{label}/]"
    return f"[{label}]"


def _edge_label(dep: Dependency) -> str:
    attrs: List[str] = []
    for ref in dep.references:
        if ref.target_attribute not in attrs:
            attrs.append(ref.target_attribute)
    return ", ".join(attrs) or "ref"


def _count_by_category(resources) -> Dict[str, int]:
    counts = {c.value: 0 for c in Category}
    for r in resources:
        counts[r.category.value] += 1
    return counts


def build_mermaid(graph: DiagramGraph) -> str:
    subgraphs: Dict[Category, List[Resource]] = defaultdict(list)
    for r in graph.resources:
        subgraphs[r.category].append(r)

    lines = ["flowchart LR"]

    for category, label in _CATEGORY_LABELS.items():
        members = subgraphs.get(category, [])
        if not members:
            continue
        lines.append(f"    subgraph {label}")
        for r in members:
            lines.append(f"        {_sanitize_node_id(r.id)}{_node_shape(r)}")
        lines.append("    end")

    for dep in graph.dependencies:
        src_id = _sanitize_node_id(dep.source)
        dst_id = _sanitize_node_id(dep.target)
        lines.append(f"    {src_id} -->|{_edge_label(dep)}| {dst_id}")

    return "\n".join(lines)


_TEMPLATE = """\
# Infrastructure Diagram

**Generated:** {{ generated }}
**Source:** {{ source }}
**Tool:** tfgraph v{{ version }}

---

## Summary

**{{ resource_count }} resources** connected by **{{ dependency_count }} dependencies**.
{% for cat, n in counts.items() if n > 0 %}
- **{{ cat }}**: {{ n }}{% endfor %}

---

## Resource Inventory

| # | Resource | Kind | Category | File |
|---|----------|------|----------|------|
{% for r in resources %}| {{ loop.index }} | `{{ r.name }}` | `{{ r.kind }}` | {{ r.category.value }} | {{ r.origin }} |
{% endfor %}

---

## Dependencies

| Source | Target | Property | Attribute |
|--------|--------|----------|-----------|
{% for d in dependencies %}{% for ref in d.references %}| `{{ d.source }}` | `{{ d.target }}` | {{ ref.source_property or "-" }} | {{ ref.target_attribute }} |
{% endfor %}{% endfor %}
{% if outputs %}
---

## Outputs

{% for rid, name, binding in outputs %}- `{{ name }}` → `{{ rid }}`{% if binding.description %}: {{ binding.description }}{% endif %}
{% endfor %}{% endif %}
---

## Dependency Diagram

```mermaid
{{ mermaid }}
```
"""


def build_report(graph: DiagramGraph, source_path: str) -> str:
    outputs = [
        (r.id, name, binding)
        for r in graph.resources
        for name, binding in r.outputs.items()
    ]

    env = Environment(autoescape=False)
    template = env.from_string(_TEMPLATE)

    return template.render(
        generated=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC"),
        source=source_path,
        version=__version__,
        resource_count=len(graph.resources),
        dependency_count=len(graph.dependencies),
        counts=_count_by_category(graph.resources),
        resources=graph.resources,
        dependencies=graph.dependencies,
        outputs=outputs,
        mermaid=build_mermaid(graph),
    )
