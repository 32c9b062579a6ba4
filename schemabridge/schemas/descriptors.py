"""
Field descriptors derived from pydantic models.

A descriptor is a small frozen record describing the declared shape of one
field: its kind, its constraints, and any modifier layers (optional, nullable,
defaulted) wrapped around it. Both converters work on descriptors only, so
pydantic internals stay confined to this module.
"""
from __future__ import annotations
import copy
import datetime
import decimal
import enum
import types
import uuid
from dataclasses import dataclass, field
from typing import (
    Any, Callable, Dict, Iterable, Iterator, Optional, Tuple, Union,
    Annotated, Literal, get_args, get_origin
)

import annotated_types
from pydantic import BaseModel, EmailStr
from pydantic.fields import FieldInfo

_UNION_TYPES = tuple(t for t in (Union, getattr(types, "UnionType", None)) if t is not None)
_SEQUENCE_ORIGINS = (list, set, frozenset)


class FieldKind(str, enum.Enum):
    """Tag of every descriptor variant."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ARRAY = "array"
    ENUM = "enum"
    LITERAL = "literal"
    OBJECT = "object"
    OPTIONAL = "optional"
    NULLABLE = "nullable"
    DEFAULTED = "defaulted"
    UNKNOWN = "unknown"


WRAPPER_KINDS = frozenset({FieldKind.OPTIONAL, FieldKind.NULLABLE, FieldKind.DEFAULTED})


@dataclass(frozen=True)
class StringCheck:
    """A single string constraint (min, max, length, regex, email or uuid)."""
    kind: str
    value: Any = None


@dataclass(frozen=True)
class NumberCheck:
    """A single numeric constraint (min, max or int)."""
    kind: str
    value: Any = None
    inclusive: bool = True


class FieldDescriptor:
    """Base class of all descriptor variants."""
    kind: FieldKind


@dataclass(frozen=True)
class StringType(FieldDescriptor):
    checks: Tuple[StringCheck, ...] = ()
    kind: FieldKind = field(default=FieldKind.STRING, init=False)

    def check(self, kind: str) -> Optional[StringCheck]:
        return next((c for c in self.checks if c.kind == kind), None)

    def has_check(self, kind: str) -> bool:
        return self.check(kind) is not None

    @property
    def exact_length(self) -> Optional[int]:
        found = self.check("length")
        return found.value if found else None


@dataclass(frozen=True)
class NumberType(FieldDescriptor):
    checks: Tuple[NumberCheck, ...] = ()
    kind: FieldKind = field(default=FieldKind.NUMBER, init=False)

    def check(self, kind: str) -> Optional[NumberCheck]:
        return next((c for c in self.checks if c.kind == kind), None)

    @property
    def is_integer(self) -> bool:
        return self.check("int") is not None


@dataclass(frozen=True)
class BooleanType(FieldDescriptor):
    kind: FieldKind = field(default=FieldKind.BOOLEAN, init=False)


@dataclass(frozen=True)
class DateType(FieldDescriptor):
    kind: FieldKind = field(default=FieldKind.DATE, init=False)


@dataclass(frozen=True)
class ArrayType(FieldDescriptor):
    element: FieldDescriptor
    kind: FieldKind = field(default=FieldKind.ARRAY, init=False)


@dataclass(frozen=True)
class EnumType(FieldDescriptor):
    """
    Enumerated values. ``values`` are the identifiers (member names when the
    member values are not strings); ``members`` holds the raw member values.
    """
    values: Tuple[str, ...]
    members: Tuple[Any, ...] = field(default=(), compare=False)
    kind: FieldKind = field(default=FieldKind.ENUM, init=False)

    @property
    def raw_values(self) -> Tuple[Any, ...]:
        return self.members or self.values

    def label(self, value: Any) -> Optional[str]:
        """The identifier for a member or a raw value, or None if it is not one of ours."""
        if isinstance(value, enum.Enum):
            value = value.value
        for label, raw in zip(self.values, self.raw_values):
            if raw == value and isinstance(raw, bool) == isinstance(value, bool):
                return label
        return None


@dataclass(frozen=True)
class LiteralType(FieldDescriptor):
    value: Any
    kind: FieldKind = field(default=FieldKind.LITERAL, init=False)


@dataclass(frozen=True)
class ObjectType(FieldDescriptor):
    """An object shape. ``fields`` is resolved lazily so self-referencing models terminate."""
    model: Optional[type] = None
    kind: FieldKind = field(default=FieldKind.OBJECT, init=False)

    @property
    def fields(self) -> Dict[str, FieldDescriptor]:
        if self.model is None:
            return {}
        return model_shape(self.model)


@dataclass(frozen=True)
class OptionalType(FieldDescriptor):
    inner: FieldDescriptor
    kind: FieldKind = field(default=FieldKind.OPTIONAL, init=False)


@dataclass(frozen=True)
class NullableType(FieldDescriptor):
    inner: FieldDescriptor
    kind: FieldKind = field(default=FieldKind.NULLABLE, init=False)


@dataclass(frozen=True)
class DefaultedType(FieldDescriptor):
    inner: FieldDescriptor
    default: Callable[[], Any] = field(compare=False)
    dynamic: bool = field(default=False, compare=False)
    kind: FieldKind = field(default=FieldKind.DEFAULTED, init=False)


@dataclass(frozen=True)
class UnknownType(FieldDescriptor):
    annotation: Any = None
    kind: FieldKind = field(default=FieldKind.UNKNOWN, init=False)


def is_model_class(obj: Any) -> bool:
    """True for pydantic ``BaseModel`` subclasses (not instances)."""
    return isinstance(obj, type) and issubclass(obj, BaseModel)


def _iter_constraints(metadata: Iterable[Any]) -> Iterator[Any]:
    for item in metadata:
        if isinstance(item, FieldInfo):
            yield from _iter_constraints(item.metadata)
        elif isinstance(item, annotated_types.GroupedMetadata):
            yield from _iter_constraints(item)
        else:
            yield item


def _pattern_of(item: Any) -> Optional[str]:
    pattern = getattr(item, "pattern", None)
    if pattern is None:
        return None
    return getattr(pattern, "pattern", pattern)


def _string_type(metadata: Tuple[Any, ...], *extra: StringCheck) -> StringType:
    min_length = max_length = None
    checks = list(extra)
    for item in _iter_constraints(metadata):
        if isinstance(item, annotated_types.MinLen):
            min_length = item.min_length
        elif isinstance(item, annotated_types.MaxLen):
            max_length = item.max_length
        elif _pattern_of(item) is not None:
            checks.append(StringCheck("regex", _pattern_of(item)))

    if min_length is not None and min_length == max_length:
        checks.append(StringCheck("length", min_length))
    else:
        if min_length is not None:
            checks.append(StringCheck("min", min_length))
        if max_length is not None:
            checks.append(StringCheck("max", max_length))
    return StringType(tuple(checks))


def _number_type(metadata: Tuple[Any, ...], integer: bool) -> NumberType:
    checks = []
    for item in _iter_constraints(metadata):
        if isinstance(item, annotated_types.Ge):
            checks.append(NumberCheck("min", item.ge))
        elif isinstance(item, annotated_types.Gt):
            checks.append(NumberCheck("min", item.gt, inclusive=False))
        elif isinstance(item, annotated_types.Le):
            checks.append(NumberCheck("max", item.le))
        elif isinstance(item, annotated_types.Lt):
            checks.append(NumberCheck("max", item.lt, inclusive=False))
    if integer:
        checks.append(NumberCheck("int"))
    return NumberType(tuple(checks))


def _enum_value(member: enum.Enum) -> str:
    return member.value if isinstance(member.value, str) else member.name


def describe_annotation(annotation: Any, metadata: Iterable[Any] = ()) -> FieldDescriptor:
    """Convert a type annotation (plus any constraint metadata) to a descriptor."""
    metadata = tuple(metadata)
    origin = get_origin(annotation)

    if origin is Annotated:
        base, *extra = get_args(annotation)
        return describe_annotation(base, metadata + tuple(extra))

    if origin in _UNION_TYPES:
        args = get_args(annotation)
        members = [a for a in args if a is not type(None)]
        if len(members) == 1 and len(members) < len(args):
            return NullableType(describe_annotation(members[0], metadata))
        return UnknownType(annotation)

    if origin is Literal:
        values = get_args(annotation)
        if len(values) == 1:
            return LiteralType(values[0])
        if all(isinstance(v, str) for v in values):
            return EnumType(tuple(values))
        return UnknownType(annotation)

    if origin in _SEQUENCE_ORIGINS:
        args = get_args(annotation)
        return ArrayType(describe_annotation(args[0]) if args else UnknownType(Any))

    if origin is tuple:
        args = get_args(annotation)
        if len(args) == 2 and args[1] is Ellipsis:
            return ArrayType(describe_annotation(args[0]))
        return UnknownType(annotation)

    if origin is dict:
        return ObjectType()

    if not isinstance(annotation, type):
        return UnknownType(annotation)

    if annotation is EmailStr:
        return _string_type(metadata, StringCheck("email"))
    if issubclass(annotation, BaseModel):
        return ObjectType(annotation)
    if issubclass(annotation, enum.Enum):
        return EnumType(
            tuple(_enum_value(m) for m in annotation),
            tuple(m.value for m in annotation),
        )
    if annotation is bool:
        return BooleanType()
    if issubclass(annotation, str):
        return _string_type(metadata)
    if annotation is uuid.UUID:
        return _string_type(metadata, StringCheck("uuid"))
    if issubclass(annotation, int):
        return _number_type(metadata, integer=True)
    if issubclass(annotation, (float, decimal.Decimal)):
        return _number_type(metadata, integer=False)
    if issubclass(annotation, (datetime.datetime, datetime.date)):
        return DateType()
    if annotation in _SEQUENCE_ORIGINS or annotation is tuple:
        return ArrayType(UnknownType(Any))
    if annotation is dict:
        return ObjectType()

    return UnknownType(annotation)


def _default_thunk(info: FieldInfo) -> Callable[[], Any]:
    if info.default_factory is not None:
        return info.default_factory
    default = info.default
    return lambda: copy.deepcopy(default)


def describe_field(info: FieldInfo) -> FieldDescriptor:
    """Describe one pydantic field, wrapping it in Optional or Defaulted when it is not required."""
    descriptor = describe_annotation(info.annotation, info.metadata)
    if info.is_required():
        return descriptor
    if info.default_factory is None and info.default is None:
        return OptionalType(descriptor)
    return DefaultedType(descriptor, _default_thunk(info), dynamic=info.default_factory is not None)


def field_key(name: str, info: FieldInfo) -> str:
    """The key a field is stored under: its alias when one is declared."""
    return info.alias or name


def model_shape(model: type) -> Dict[str, FieldDescriptor]:
    """Describe every field of a model, in declaration order."""
    return {
        field_key(name, info): describe_field(info)
        for name, info in model.model_fields.items()
    }


def describe_model(model: type) -> ObjectType:
    """Describe a model as a whole."""
    return ObjectType(model)


__all__ = [
    "FieldKind", "WRAPPER_KINDS", "StringCheck", "NumberCheck", "FieldDescriptor",
    "StringType", "NumberType", "BooleanType", "DateType", "ArrayType", "EnumType",
    "LiteralType", "ObjectType", "OptionalType", "NullableType", "DefaultedType",
    "UnknownType", "is_model_class", "describe_annotation", "describe_field",
    "field_key", "model_shape", "describe_model",
]
