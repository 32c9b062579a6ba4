"""
Reference markers: fields that point at a document in another collection.
"""
from typing import Any, Optional, Annotated, Literal

from pydantic import AfterValidator, BaseModel, Field, PlainSerializer, StringConstraints, create_model

from .descriptors import FieldDescriptor, LiteralType, ObjectType, StringType

REF_KEY = "_ref"
OBJECT_ID_LENGTH = 24

# A document identifier: exactly 24 characters
ObjectIdStr = Annotated[str, StringConstraints(min_length=OBJECT_ID_LENGTH, max_length=OBJECT_ID_LENGTH)]


def _ref_id(marker: BaseModel) -> Any:
    return marker.id


def model_ref(model_name: str, id_type: Any = ObjectIdStr) -> Any:
    """
    Build a reference to a document of ``model_name``.

    The returned annotation accepts ``{"_ref": model_name, "id": ...}`` and
    validates to the bare id. The document converter recognises it by shape
    and emits an ``ObjectId`` field pointing at ``model_name``.

        class Post(BaseModel):
            author: model_ref("User")
    """
    marker = create_model(
        f"{model_name}Ref",
        ref=(Literal[model_name], Field(alias=REF_KEY)),
        id=(id_type, ...),
    )
    return Annotated[
        marker,
        AfterValidator(_ref_id),
        PlainSerializer(lambda value: value, return_type=str),
    ]


def reference_target(descriptor: FieldDescriptor) -> Optional[str]:
    """Return the referenced model name if ``descriptor`` has the reference marker shape."""
    if not isinstance(descriptor, ObjectType) or descriptor.model is None:
        return None

    shape = descriptor.fields
    if set(shape) != {REF_KEY, "id"}:
        return None

    tag, ident = shape[REF_KEY], shape["id"]
    if not isinstance(tag, LiteralType) or not isinstance(tag.value, str):
        return None
    if not isinstance(ident, StringType) or ident.exact_length != OBJECT_ID_LENGTH:
        return None
    return tag.value


__all__ = ["REF_KEY", "OBJECT_ID_LENGTH", "ObjectIdStr", "model_ref", "reference_target"]
