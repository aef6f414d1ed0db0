from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Union

# Values found inside a resource's configuration tree.
ConfigValue = Union[
    str, int, float, bool, None, Dict[str, "ConfigValue"], List["ConfigValue"]
]


class Category(str, Enum):
    NETWORKING = "networking"
    COMPUTE    = "compute"
    STORAGE    = "storage"
    DATABASE   = "database"
    SECURITY   = "security"
    ANALYTICS  = "analytics"
    CONTAINER  = "container"
    OTHER      = "other"


@dataclass
class OutputBinding:
    value: Any
    description: str = ""

    def to_dict(self) -> dict:
        return {"value": self.value, "description": self.description}


@dataclass
class Resource:
    kind: str              # e.g. "aws_subnet"
    name: str              # instance label, e.g. "public"
    category: Category = Category.OTHER
    inputs: Dict[str, ConfigValue] = field(default_factory=dict)
    outputs: Dict[str, OutputBinding] = field(default_factory=dict)
    origin: str = ""       # source file path

    @property
    def id(self) -> str:
        return f"{self.kind}.{self.name}"

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "name": self.name,
            "category": self.category.value,
            "inputs": self.inputs,
            "outputs": {k: v.to_dict() for k, v in self.outputs.items()},
            # line numbers are not tracked
            "origin": {"file": self.origin, "line": 0},
        }
