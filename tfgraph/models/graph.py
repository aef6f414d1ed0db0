from dataclasses import dataclass, field
from typing import List, Tuple

from tfgraph.models.resource import Resource


@dataclass(frozen=True)
class Reference:
    source_property: str   # dotted path inside the source inputs, "" if unknown
    target_attribute: str  # e.g. "id", "arn"
    raw_expression: str    # e.g. "${aws_vpc.main.id}"

    def to_dict(self) -> dict:
        return {
            "sourceProperty": self.source_property,
            "targetAttribute": self.target_attribute,
            "rawExpression": self.raw_expression,
        }


@dataclass
class Dependency:
    source: str
    target: str
    references: List[Reference] = field(default_factory=list)

    @property
    def key(self) -> Tuple[str, str]:
        return (self.source, self.target)

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "target": self.target,
            "references": [r.to_dict() for r in self.references],
        }


@dataclass(frozen=True)
class DiagramGraph:
    resources: Tuple[Resource, ...]
    dependencies: Tuple[Dependency, ...]

    def to_dict(self) -> dict:
        return {
            "resources": [r.to_dict() for r in self.resources],
            "dependencies": [d.to_dict() for d in self.dependencies],
        }
