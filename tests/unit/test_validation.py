"""
Unit tests for validate-and-coerce.
"""
from typing import List

import pytest
from pydantic import BaseModel, Field

from schemabridge import SchemaValidationError, model_ref, partial_model, to_object


class Member(BaseModel):
    name: str = Field(min_length=2)
    age: int
    active: bool = True


class Address(BaseModel):
    city: str


class Order(BaseModel):
    address: Address


class Post(BaseModel):
    author: model_ref("User")


class Contact(BaseModel):
    full_name: str = Field(validation_alias="fullName", serialization_alias="displayName")
    age: int


class TestToObject:
    """Test cases for to_object."""

    def test_valid_data(self):
        result = to_object(Member, {"name": "John", "age": 30})
        assert result == {"name": "John", "age": 30, "active": True}

    def test_coercion(self):
        assert to_object(Member, {"name": "John", "age": "30"})["age"] == 30
        assert to_object(List[int], ["1", "2"]) == [1, 2]

    def test_invalid_data(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            to_object(Member, {"name": "John", "age": "not-a-number"})
        message = str(exc_info.value)
        assert message.startswith("Validation error: ")
        assert "age - Input should be a valid integer" in message

    def test_every_violation_is_reported(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            to_object(Member, {})
        assert str(exc_info.value) == "Validation error: name - Field required, age - Field required"
        assert len(exc_info.value.errors) == 2
        assert exc_info.value.original_exception is not None

    def test_nested_paths_are_dotted(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            to_object(Order, {"address": {}})
        assert "address.city - Field required" in str(exc_info.value)

    def test_partial(self):
        assert to_object(Member, {"name": "John"}, partial=True) == {"name": "John"}
        with pytest.raises(SchemaValidationError) as exc_info:
            to_object(Member, {"name": "John"})
        assert "age - Field required" in str(exc_info.value)

    def test_partial_keeps_field_aliases(self):
        assert to_object(Contact, {"fullName": "Ada", "age": 3}) == {"displayName": "Ada", "age": 3}
        assert to_object(Contact, {"fullName": "Ada"}, partial=True) == {"displayName": "Ada"}

        field = partial_model(Contact).model_fields["full_name"]
        assert field.validation_alias == "fullName"
        assert field.serialization_alias == "displayName"
        assert field.default is None

    def test_partial_keeps_constraints(self):
        with pytest.raises(SchemaValidationError):
            to_object(Member, {"name": "J"}, partial=True)

    def test_reference_marker_validates_to_id(self):
        ident = "a" * 24
        assert to_object(Post, {"author": {"_ref": "User", "id": ident}}) == {"author": ident}
        with pytest.raises(SchemaValidationError) as exc_info:
            to_object(Post, {"author": {"_ref": "User", "id": "short"}})
        assert "author.id" in str(exc_info.value)
