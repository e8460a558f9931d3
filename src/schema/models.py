from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class DataType(str, Enum):
    """JSON Schema type of a Definition."""

    OBJECT = "object"
    NUMBER = "number"
    INTEGER = "integer"
    STRING = "string"
    ARRAY = "array"
    NULL = "null"
    BOOLEAN = "boolean"


@dataclass()
class Definition:
    """
    One JSON-Schema node describing a parameter or field.

    Attributes:
        type: Data type of the schema; NULL marks an unsupported type
        description: Doc comment text for the field or parameter
        enum: Allowed values, in tag order; unique and non-empty when set
        properties: Child schemas by field name, for OBJECT
        required: Property names that must be present, for OBJECT
        items: Element schema, for ARRAY
    """

    type: DataType
    description: str = ""
    enum: Optional[list[str]] = None
    properties: dict[str, "Definition"] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)
    items: Optional["Definition"] = None

    def add_property(self, name: str, definition: "Definition", required: bool = True) -> None:
        self.properties[name] = definition
        if required and name not in self.required:
            self.required.append(name)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form; empty fields are omitted."""
        out: dict[str, Any] = {"type": self.type.value}
        if self.description:
            out["description"] = self.description
        if self.enum:
            out["enum"] = list(self.enum)
        if self.properties:
            out["properties"] = {name: d.to_dict() for name, d in self.properties.items()}
        if self.required:
            out["required"] = list(self.required)
        if self.items is not None:
            out["items"] = self.items.to_dict()
        return out


@dataclass(frozen=True)
class FunctionDetails:
    """Describes a Go function for a function-calling API."""

    name: str
    description: str
    parameters: Definition

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters.to_dict(),
        }
