"""
Schema introspection: descriptors, reference markers and unwrapping.
"""
from .descriptors import (
    FieldKind, FieldDescriptor, StringType, NumberType, BooleanType, DateType,
    ArrayType, EnumType, LiteralType, ObjectType, OptionalType, NullableType,
    DefaultedType, UnknownType, StringCheck, NumberCheck,
    describe_annotation, describe_field, describe_model, model_shape, is_model_class,
)
from .references import REF_KEY, OBJECT_ID_LENGTH, ObjectIdStr, model_ref, reference_target
from .unwrap import UnwrappedField, unwrap
from .fallbacks import FieldFallback, record_fallback

__all__ = [
    'FieldKind', 'FieldDescriptor', 'StringType', 'NumberType', 'BooleanType',
    'DateType', 'ArrayType', 'EnumType', 'LiteralType', 'ObjectType',
    'OptionalType', 'NullableType', 'DefaultedType', 'UnknownType',
    'StringCheck', 'NumberCheck',
    'describe_annotation', 'describe_field', 'describe_model', 'model_shape', 'is_model_class',
    'REF_KEY', 'OBJECT_ID_LENGTH', 'ObjectIdStr', 'model_ref', 'reference_target',
    'UnwrappedField', 'unwrap',
    'FieldFallback', 'record_fallback',
]
