"""
Validation and coercion of raw data against a schema.
"""
import logging
from typing import Any, Dict, List, Type, Annotated

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, create_model
from pydantic.fields import FieldInfo

from .exceptions import SchemaValidationError
from .schemas.descriptors import is_model_class

logger = logging.getLogger(__name__)

# FieldInfo settings a partial field keeps; only the default is replaced
CARRIED_FIELD_ATTRIBUTES = (
    "alias", "alias_priority", "validation_alias", "serialization_alias",
    "title", "description", "examples", "exclude", "discriminator",
    "json_schema_extra", "frozen",
)


def _partial_field(info: FieldInfo) -> FieldInfo:
    kwargs = {
        name: getattr(info, name)
        for name in CARRIED_FIELD_ATTRIBUTES
        if getattr(info, name, None) is not None
    }
    return Field(default=None, **kwargs)


def partial_model(schema: Type[BaseModel]) -> Type[BaseModel]:
    """
    Derive a model whose fields may all be omitted.

    Constraints, validators and aliases are kept; omitted fields default to
    None and are never validated.
    """
    field_definitions = {}
    for name, info in schema.model_fields.items():
        annotation = info.annotation
        if info.metadata:
            annotation = Annotated[(annotation, *info.metadata)]
        field_definitions[name] = (annotation, _partial_field(info))
    return create_model(f"Partial{schema.__name__}", __base__=schema, **field_definitions)


def format_errors(errors: List[Dict[str, Any]]) -> str:
    """Join errors as ``<dotted.path> - <message>``."""
    return ", ".join(
        f"{'.'.join(str(part) for part in error['loc'])} - {error['msg']}"
        for error in errors
    )


def to_object(schema: Any, data: Any, *, partial: bool = False) -> Any:
    """
    Validate ``data`` against ``schema`` and return the coerced value.

    Args:
        schema: A pydantic model class, or any type pydantic can validate
        data: The raw input
        partial: Allow every field of a model schema to be omitted (for updates)

    Returns:
        Plain Python data with defaults applied. Partial results only contain
        the fields that were provided.

    Raises:
        SchemaValidationError: listing every violation, not just the first
    """
    target = schema
    if partial and is_model_class(schema):
        target = partial_model(schema)

    adapter = TypeAdapter(target)
    try:
        value = adapter.validate_python(data)
    except ValidationError as exc:
        errors = exc.errors(include_url=False)
        message = f"Validation error: {format_errors(errors)}"
        logger.debug(message)
        raise SchemaValidationError(
            message,
            errors=errors,
            context={"schema": getattr(schema, "__name__", repr(schema)), "partial": partial},
            original_exception=exc,
        ) from exc

    return adapter.dump_python(value, exclude_unset=partial, by_alias=True)


__all__ = ["to_object", "partial_model", "format_errors"]
