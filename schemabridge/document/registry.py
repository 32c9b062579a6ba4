"""
Registry of document models built from document schema definitions.

Registration is idempotent per name: asking twice for the same name returns
the model built the first time, without calling the factory again. The
registry is a plain object owned by the caller; concurrent registration of
the same name from several threads must be serialized by the caller.
"""
import datetime
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Set, Tuple, Type, Literal

from pydantic import BaseModel, ConfigDict, Field, create_model

from ..core.config import settings
from ..schemas.fallbacks import FieldFallback
from ..schemas.references import ObjectIdStr
from .converter import document_schema
from .types import DocumentDefinition, DocumentField, DocumentType

logger = logging.getLogger(__name__)

DocumentModelFactory = Callable[[str, DocumentDefinition, bool], Any]

PYTHON_TYPES: Dict[DocumentType, Any] = {
    DocumentType.STRING: str,
    DocumentType.NUMBER: float,
    DocumentType.BOOLEAN: bool,
    DocumentType.DATE: datetime.datetime,
    DocumentType.OBJECT_ID: ObjectIdStr,
    DocumentType.MIXED: Any,
}


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def _field_annotation(field: DocumentField) -> Any:
    if field.enum:
        annotation = Literal[tuple(field.enum)]
    elif field.type is DocumentType.NUMBER and field.validate is not None:
        annotation = int
    else:
        annotation = PYTHON_TYPES[field.type]

    if field.is_array:
        annotation = List[annotation]
    if not field.required:
        annotation = Optional[annotation]
    return annotation


def _field_constraints(field: DocumentField) -> Dict[str, Any]:
    if field.is_array:
        return {}
    constraints = {
        "min_length": field.length if field.length is not None else field.minlength,
        "max_length": field.length if field.length is not None else field.maxlength,
        "pattern": field.match.pattern if field.match is not None else None,
        "ge": field.min,
        "le": field.max,
    }
    return {key: value for key, value in constraints.items() if value is not None}


def _attribute_name(key: str, taken: Set[str]) -> str:
    """Python attribute for ``key``; leading underscores are dropped without clashing with ``taken``."""
    if not key.startswith("_"):
        return key
    name = key.lstrip("_") or "field"
    while name in taken:
        name = f"{name}_"
    return name


def _field_definition(key: str, field: DocumentField, taken: Set[str]) -> Tuple[str, Tuple[Any, Any]]:
    kwargs = _field_constraints(field)

    if field.has_default:
        kwargs["default"] = field.default
    elif not field.required:
        kwargs["default"] = None

    name = _attribute_name(key, taken)
    if name != key:
        kwargs["alias"] = key

    return name, (_field_annotation(field), Field(**kwargs))


def build_document_model(name: str, definition: DocumentDefinition, timestamps: bool = True) -> Type[BaseModel]:
    """Create a pydantic document model from a definition map."""
    taken = {key for key in definition if not key.startswith("_")}
    field_definitions = {}
    for key, field in definition.items():
        attribute, spec = _field_definition(key, field, taken)
        taken.add(attribute)
        field_definitions[attribute] = spec

    if timestamps:
        field_definitions.setdefault("created_at", (datetime.datetime, Field(default_factory=_utcnow)))
        field_definitions.setdefault("updated_at", (datetime.datetime, Field(default_factory=_utcnow)))

    config = ConfigDict(
        from_attributes=True,
        arbitrary_types_allowed=True,
        validate_assignment=True,
        populate_by_name=True,
    )

    return create_model(name, __config__=config, **field_definitions)


class DocumentModelRegistry:
    """Name -> model registry with idempotent ``get_or_create``."""

    def __init__(
        self,
        factory: Optional[DocumentModelFactory] = None,
        *,
        timestamps: Optional[bool] = None
    ) -> None:
        self._factory = factory or build_document_model
        self.timestamps = settings.DOCUMENT_TIMESTAMPS if timestamps is None else timestamps
        self._models: Dict[str, Any] = {}
        self._definitions: Dict[str, DocumentDefinition] = {}

    def get_or_create(self, name: str, definition: DocumentDefinition) -> Any:
        """Return the model registered under ``name``, building it from ``definition`` on first use."""
        if name in self._models:
            logger.debug(f"Document model {name} already registered, reusing it")
            return self._models[name]

        model = self._factory(name, definition, self.timestamps)
        self._models[name] = model
        self._definitions[name] = definition
        logger.info(f"Registered document model {name} ({len(definition)} fields)")
        return model

    def get(self, name: str) -> Optional[Any]:
        return self._models.get(name)

    def definition(self, name: str) -> Optional[DocumentDefinition]:
        return self._definitions.get(name)

    def names(self) -> List[str]:
        return list(self._models)

    def clear(self) -> None:
        self._models.clear()
        self._definitions.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._models

    def __len__(self) -> int:
        return len(self._models)


def create_document_model(
    registry: DocumentModelRegistry,
    name: str,
    schema: Any,
    relationships: Optional[Mapping[str, str]] = None,
    *,
    fallbacks: Optional[List[FieldFallback]] = None
) -> Any:
    """
    Convert ``schema`` and register it under ``name``.

    If ``name`` is already registered the existing model is returned and the
    schema is not converted again.
    """
    if name in registry:
        return registry.get(name)
    definition = document_schema(schema, relationships, fallbacks=fallbacks)
    return registry.get_or_create(name, definition)


__all__ = [
    "DocumentModelRegistry", "DocumentModelFactory", "build_document_model",
    "create_document_model", "PYTHON_TYPES",
]
