"""
Target field definitions for the document-mapper output.
"""
import enum
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Pattern


class DocumentType(str, enum.Enum):
    """Field type tags understood by document mappers."""
    STRING = "String"
    NUMBER = "Number"
    BOOLEAN = "Boolean"
    DATE = "Date"
    OBJECT_ID = "ObjectId"
    MIXED = "Mixed"


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
UUID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)
INTEGER_MESSAGE = "{VALUE} is not an integer value"


def is_integer_value(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


@dataclass(frozen=True)
class FieldValidator:
    """A custom validator attached to a field."""
    validator: Callable[[Any], bool]
    message: str


@dataclass
class DocumentField:
    """
    One field of a document schema definition.

    Either a scalar type with its constraints, or an ``ObjectId`` with
    ``ref`` naming the referenced collection. ``required`` is always the
    negation of "declared optional".
    """
    type: DocumentType
    required: bool = True
    is_array: bool = False
    has_default: bool = False
    default: Any = None
    ref: Optional[str] = None
    minlength: Optional[int] = None
    maxlength: Optional[int] = None
    length: Optional[int] = None
    match: Optional[Pattern[str]] = None
    min: Optional[float] = None
    max: Optional[float] = None
    enum: Optional[List[Any]] = None
    validate: Optional[FieldValidator] = None

    def to_dict(self) -> Dict[str, Any]:
        """Render the mapper-style options map, with only populated keys."""
        options: Dict[str, Any] = {
            "type": [self.type.value] if self.is_array else self.type.value,
            "required": self.required,
        }
        if self.has_default:
            options["default"] = self.default
        for key in ("ref", "minlength", "maxlength", "length", "match", "min", "max", "enum"):
            value = getattr(self, key)
            if value is not None:
                options[key] = value
        if self.validate is not None:
            options["validate"] = {
                "validator": self.validate.validator,
                "message": self.validate.message,
            }
        return options


DocumentDefinition = Dict[str, DocumentField]

__all__ = [
    "DocumentType", "DocumentField", "DocumentDefinition", "FieldValidator",
    "EMAIL_PATTERN", "UUID_PATTERN", "INTEGER_MESSAGE", "is_integer_value",
]
