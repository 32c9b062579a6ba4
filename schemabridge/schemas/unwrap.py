"""
Stripping of modifier layers around a field descriptor.
"""
from dataclasses import dataclass
from typing import Any

from .descriptors import DefaultedType, FieldDescriptor, NullableType, OptionalType


@dataclass(frozen=True)
class UnwrappedField:
    """A base descriptor plus what its wrappers said about it."""
    descriptor: FieldDescriptor
    is_optional: bool = False
    is_nullable: bool = False
    has_default: bool = False
    default: Any = None
    default_is_dynamic: bool = False


def unwrap(descriptor: FieldDescriptor) -> UnwrappedField:
    """
    Strip Optional, Nullable and Defaulted layers in any nesting order.

    The first Defaulted layer wins; its thunk is called once to materialize
    the default value. ``default_is_dynamic`` tells a factory-made default
    apart from a constant one.
    """
    is_optional = is_nullable = has_default = default_is_dynamic = False
    default = None

    current = descriptor
    while isinstance(current, (OptionalType, NullableType, DefaultedType)):
        if isinstance(current, OptionalType):
            is_optional = True
        elif isinstance(current, DefaultedType):
            if not has_default:
                has_default = True
                default = current.default()
                default_is_dynamic = current.dynamic
        else:
            is_nullable = True
        current = current.inner

    return UnwrappedField(
        descriptor=current,
        is_optional=is_optional,
        is_nullable=is_nullable,
        has_default=has_default,
        default=default,
        default_is_dynamic=default_is_dynamic,
    )


__all__ = ["UnwrappedField", "unwrap"]
