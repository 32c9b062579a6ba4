"""
Unit tests for converting pydantic models to document schema definitions.
"""
import datetime
import enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, EmailStr, Field

from schemabridge import DocumentType, document_schema, model_ref
from schemabridge.document.converter import SCALAR_BUILDERS
from schemabridge.schemas.descriptors import FieldKind, WRAPPER_KINDS


class Person(BaseModel):
    name: str = Field(min_length=2, max_length=50)
    age: int = Field(ge=0, le=120)
    email: EmailStr
    tags: List[str]


class Profile(BaseModel):
    name: Optional[str] = None
    age: Optional[int] = None
    score: float = 100
    joined: datetime.datetime = Field(default_factory=lambda: datetime.datetime(2024, 1, 1))


class Role(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class Priority(enum.IntEnum):
    LOW = 1
    HIGH = 2


class Task(BaseModel):
    priority: Priority = Priority.LOW
    role: Role = Role.ADMIN


class Address(BaseModel):
    city: str


class Account(BaseModel):
    role: Role
    kind: Literal["admin"]
    version: Literal[2]
    born: datetime.date
    active: bool
    address: Address
    either: Union[int, str]
    addresses: List[Address]
    flags: List[bool]
    code: str = Field(min_length=6, max_length=6)


class Post(BaseModel):
    title: str
    author: model_ref("User")
    reviewers: List[model_ref("User")] = []
    owner: str
    watchers: List[str]


class TestDocumentSchema:
    """Test cases for document_schema."""

    def test_basic_conversion(self):
        definition = document_schema(Person)
        assert list(definition) == ["name", "age", "email", "tags"]

        name = definition["name"]
        assert name.type is DocumentType.STRING
        assert name.minlength == 2
        assert name.maxlength == 50
        assert name.required is True

        age = definition["age"]
        assert age.type is DocumentType.NUMBER
        assert age.min == 0
        assert age.max == 120
        assert age.required is True

        email = definition["email"]
        assert email.type is DocumentType.STRING
        assert email.match.match("user@example.com")
        assert email.match.match("not-an-email") is None
        assert email.required is True

        tags = definition["tags"]
        assert tags.to_dict() == {"type": ["String"], "required": True}

    def test_integer_validator(self):
        age = document_schema(Person)["age"]
        assert age.validate.validator(3)
        assert not age.validate.validator(3.5)
        assert age.validate.message == "{VALUE} is not an integer value"

    def test_optional_fields_are_not_required(self):
        definition = document_schema(Profile)
        assert definition["name"].required is False
        assert definition["name"].type is DocumentType.STRING
        assert definition["age"].required is False
        assert definition["age"].type is DocumentType.NUMBER

    def test_defaults(self):
        definition = document_schema(Profile)
        assert definition["score"].required is True
        assert definition["score"].default == 100
        assert definition["score"].to_dict()["default"] == 100
        assert definition["joined"].default == datetime.datetime(2024, 1, 1)
        assert "default" not in definition["name"].to_dict()

    def test_enum_defaults_match_enum_values(self):
        definition = document_schema(Task)
        assert definition["priority"].to_dict() == {
            "type": "Number", "required": True, "default": 1, "enum": [1, 2],
        }
        assert definition["role"].default == "admin"
        assert definition["role"].default in definition["role"].enum

    def test_scalar_table(self, fallbacks):
        definition = document_schema(Account, fallbacks=fallbacks)
        assert definition["role"].to_dict() == {"type": "String", "required": True, "enum": ["user", "admin"]}
        assert definition["kind"].enum == ["admin"]
        assert definition["kind"].type is DocumentType.STRING
        assert definition["version"].type is DocumentType.NUMBER
        assert definition["born"].type is DocumentType.DATE
        assert definition["active"].type is DocumentType.BOOLEAN
        assert definition["address"].type is DocumentType.MIXED
        assert definition["either"].type is DocumentType.MIXED
        assert definition["addresses"].to_dict()["type"] == ["Mixed"]
        assert definition["flags"].to_dict()["type"] == ["Boolean"]
        assert definition["code"].length == 6

    def test_fallbacks_are_reported(self, fallbacks):
        document_schema(Account, fallbacks=fallbacks)
        assert [f.field for f in fallbacks] == ["address", "either", "addresses"]
        assert all(f.model == "Account" for f in fallbacks)

    def test_reference_markers(self):
        definition = document_schema(Post)
        assert definition["author"].to_dict() == {"type": "ObjectId", "required": True, "ref": "User"}
        reviewers = definition["reviewers"]
        assert reviewers.to_dict()["type"] == ["ObjectId"]
        assert reviewers.ref == "User"

    def test_relationship_table(self):
        definition = document_schema(Post, {"owner": "User", "watchers": "User"})
        assert definition["owner"].to_dict() == {"type": "ObjectId", "required": True, "ref": "User"}
        assert definition["watchers"].to_dict() == {"type": ["ObjectId"], "required": True, "ref": "User"}

    def test_table_disables_markers(self):
        definition = document_schema(Post, {})
        assert definition["author"].type is DocumentType.MIXED
        assert definition["watchers"].to_dict()["type"] == ["String"]

    def test_non_model_returns_empty_definition(self):
        assert document_schema(str) == {}

    def test_every_scalar_kind_is_mapped(self):
        scalar_kinds = set(FieldKind) - WRAPPER_KINDS - {FieldKind.ARRAY}
        assert scalar_kinds <= set(SCALAR_BUILDERS)
