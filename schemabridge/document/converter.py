"""
Conversion of pydantic models to document schema definitions.

Each field is unwrapped, then classified as a reference, an array, or a
scalar. Relationships come either from an explicit ``relationships`` table
(field name -> referenced collection) or, when no table is passed, from
reference markers built with :func:`schemabridge.schemas.model_ref`.
"""
import enum
import logging
import re
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..schemas.descriptors import (
    ArrayType, EnumType, FieldDescriptor, FieldKind, LiteralType, NumberType,
    StringType, is_model_class, model_shape
)
from ..schemas.fallbacks import FieldFallback, record_fallback
from ..schemas.references import reference_target
from ..schemas.unwrap import unwrap
from .types import (
    DocumentDefinition, DocumentField, DocumentType, EMAIL_PATTERN, FieldValidator,
    INTEGER_MESSAGE, UUID_PATTERN, is_integer_value
)

logger = logging.getLogger(__name__)

ELEMENT_TYPES = {
    FieldKind.STRING: DocumentType.STRING,
    FieldKind.NUMBER: DocumentType.NUMBER,
    FieldKind.BOOLEAN: DocumentType.BOOLEAN,
}


def _string_field(descriptor: StringType) -> DocumentField:
    field = DocumentField(type=DocumentType.STRING)
    for check in descriptor.checks:
        if check.kind == "min":
            field.minlength = check.value
        elif check.kind == "max":
            field.maxlength = check.value
        elif check.kind == "length":
            field.length = check.value
        elif check.kind == "regex":
            field.match = re.compile(check.value)
        elif check.kind == "email":
            field.match = EMAIL_PATTERN
        elif check.kind == "uuid":
            field.match = UUID_PATTERN
    return field


def _number_field(descriptor: NumberType) -> DocumentField:
    field = DocumentField(type=DocumentType.NUMBER)
    for check in descriptor.checks:
        if check.kind == "min":
            field.min = check.value
        elif check.kind == "max":
            field.max = check.value
        elif check.kind == "int":
            field.validate = FieldValidator(validator=is_integer_value, message=INTEGER_MESSAGE)
    return field


def _stores_raw_values(descriptor: EnumType) -> bool:
    raw = descriptor.raw_values
    return all(isinstance(v, str) for v in raw) or all(
        isinstance(v, (int, float)) and not isinstance(v, bool) for v in raw
    )


def _enum_field(descriptor: EnumType) -> DocumentField:
    if not _stores_raw_values(descriptor):
        return DocumentField(type=DocumentType.STRING, enum=list(descriptor.values))
    raw = list(descriptor.raw_values)
    doc_type = DocumentType.STRING if all(isinstance(v, str) for v in raw) else DocumentType.NUMBER
    return DocumentField(type=doc_type, enum=raw)


def _enum_default(descriptor: EnumType, value: Any) -> Any:
    """Express an enum default the same way the field's ``enum`` list does."""
    if not _stores_raw_values(descriptor):
        return descriptor.label(value)
    return value.value if isinstance(value, enum.Enum) else value


def _literal_field(descriptor: LiteralType) -> DocumentField:
    value = descriptor.value
    if isinstance(value, bool):
        doc_type = DocumentType.BOOLEAN
    elif isinstance(value, (int, float)):
        doc_type = DocumentType.NUMBER
    elif isinstance(value, str):
        doc_type = DocumentType.STRING
    else:
        doc_type = DocumentType.MIXED
    return DocumentField(type=doc_type, enum=[value])


SCALAR_BUILDERS: Dict[FieldKind, Callable[[Any], DocumentField]] = {
    FieldKind.STRING: _string_field,
    FieldKind.NUMBER: _number_field,
    FieldKind.BOOLEAN: lambda descriptor: DocumentField(type=DocumentType.BOOLEAN),
    FieldKind.DATE: lambda descriptor: DocumentField(type=DocumentType.DATE),
    FieldKind.ENUM: _enum_field,
    FieldKind.LITERAL: _literal_field,
    FieldKind.OBJECT: lambda descriptor: DocumentField(type=DocumentType.MIXED),
    FieldKind.UNKNOWN: lambda descriptor: DocumentField(type=DocumentType.MIXED),
}


def classify_field(
    key: str,
    descriptor: FieldDescriptor,
    relationships: Optional[Mapping[str, str]] = None
) -> DocumentField:
    """
    Decide what an unwrapped descriptor becomes. First match wins:

    1. array listed in ``relationships``: array of references
    2. field listed in ``relationships``: single reference
    3. reference marker (only without a table): single reference
    4. array: array of String / Number / Boolean, anything else Mixed
    5. scalar, per ``SCALAR_BUILDERS``
    """
    if relationships is not None and key in relationships:
        return DocumentField(
            type=DocumentType.OBJECT_ID,
            is_array=isinstance(descriptor, ArrayType),
            ref=relationships[key],
        )

    if relationships is None:
        target = reference_target(descriptor)
        if target is not None:
            return DocumentField(type=DocumentType.OBJECT_ID, ref=target)

    if isinstance(descriptor, ArrayType):
        element = descriptor.element
        if relationships is None:
            target = reference_target(unwrap(element).descriptor)
            if target is not None:
                return DocumentField(type=DocumentType.OBJECT_ID, is_array=True, ref=target)
        element_type = ELEMENT_TYPES.get(element.kind, DocumentType.MIXED)
        return DocumentField(type=element_type, is_array=True)

    return SCALAR_BUILDERS[descriptor.kind](descriptor)


def _fallback_reason(descriptor: FieldDescriptor) -> str:
    if isinstance(descriptor, ArrayType):
        return f"array of {descriptor.element.kind.value} elements is stored as Mixed"
    return f"{descriptor.kind.value} field is stored as Mixed"


def document_schema(
    schema: Any,
    relationships: Optional[Mapping[str, str]] = None,
    *,
    fallbacks: Optional[List[FieldFallback]] = None
) -> DocumentDefinition:
    """
    Convert a pydantic model to a document schema definition.

    Args:
        schema: The pydantic model class to convert
        relationships: Optional mapping of field names to referenced collection names
        fallbacks: Optional list collecting fields that degraded to Mixed

    Returns:
        Field name -> DocumentField, in declaration order
    """
    definition: DocumentDefinition = {}

    if not is_model_class(schema):
        logger.warning(f"Cannot convert {schema!r}: not a pydantic model, returning an empty definition")
        return definition

    model_name = schema.__name__
    for key, descriptor in model_shape(schema).items():
        field = unwrap(descriptor)
        doc_field = classify_field(key, field.descriptor, relationships)

        if doc_field.type is DocumentType.MIXED:
            record_fallback(
                fallbacks, model_name, key,
                getattr(field.descriptor, "annotation", None),
                _fallback_reason(field.descriptor),
            )

        if field.has_default:
            doc_field.has_default = True
            doc_field.default = field.default
            if isinstance(field.descriptor, EnumType) and doc_field.enum is not None:
                doc_field.default = _enum_default(field.descriptor, field.default)

        doc_field.required = not field.is_optional
        definition[key] = doc_field

    logger.debug(f"Converted {model_name} to a document definition with {len(definition)} fields")
    return definition


__all__ = ["document_schema", "classify_field", "SCALAR_BUILDERS", "ELEMENT_TYPES"]
