"""
Unit tests for building field descriptors from pydantic models.
"""
import datetime
import enum
from typing import Any, Dict, List, Literal, Optional, Tuple, Union
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, constr

from schemabridge.schemas import (
    ArrayType, BooleanType, DateType, DefaultedType, EnumType, LiteralType,
    NullableType, NumberType, ObjectType, OptionalType, StringType, UnknownType,
    describe_annotation, model_ref, model_shape, reference_target,
)


class Role(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class Address(BaseModel):
    street: str
    city: str


class Node(BaseModel):
    name: str
    children: List["Node"] = []


Node.model_rebuild()


class Sample(BaseModel):
    name: str = Field(min_length=2, max_length=50)
    code: constr(min_length=24, max_length=24)
    slug: str = Field(pattern=r"^[a-z-]+$")
    email: EmailStr
    key: UUID
    age: int = Field(ge=0, le=120)
    ratio: float = Field(gt=0, lt=1)
    active: bool
    born: datetime.date
    tags: List[str]
    role: Role
    kind: Literal["admin"]
    level: Literal["low", "high"]
    address: Address
    extra: Dict[str, Any]
    nickname: Optional[str] = None
    score: int = 5
    created: datetime.datetime = Field(default_factory=lambda: datetime.datetime(2024, 1, 1))
    either: Union[int, str]


class TestDescribeAnnotation:
    """Test cases for mapping annotations to descriptors."""

    def test_string_constraints(self):
        shape = model_shape(Sample)
        name = shape["name"]
        assert isinstance(name, StringType)
        assert name.check("min").value == 2
        assert name.check("max").value == 50
        assert name.exact_length is None

    def test_equal_bounds_become_exact_length(self):
        code = model_shape(Sample)["code"]
        assert code.exact_length == 24
        assert code.check("min") is None

    def test_pattern_email_and_uuid(self):
        shape = model_shape(Sample)
        assert shape["slug"].check("regex").value == r"^[a-z-]+$"
        assert shape["email"].has_check("email")
        assert shape["key"].has_check("uuid")

    def test_number_checks(self):
        shape = model_shape(Sample)
        age = shape["age"]
        assert isinstance(age, NumberType)
        assert age.is_integer
        assert age.check("min").value == 0
        assert age.check("max").value == 120

        ratio = shape["ratio"]
        assert not ratio.is_integer
        assert ratio.check("min").inclusive is False
        assert ratio.check("max").value == 1

    def test_scalars(self):
        shape = model_shape(Sample)
        assert shape["active"] == BooleanType()
        assert shape["born"] == DateType()
        assert shape["tags"] == ArrayType(StringType())

    def test_enums_and_literals(self):
        shape = model_shape(Sample)
        assert shape["role"] == EnumType(("user", "admin"))
        assert shape["kind"] == LiteralType("admin")
        assert shape["level"] == EnumType(("low", "high"))

    def test_enum_labels(self):
        class Priority(enum.IntEnum):
            LOW = 1
            HIGH = 2

        priority = describe_annotation(Priority)
        assert priority.values == ("LOW", "HIGH")
        assert priority.raw_values == (1, 2)
        assert priority.label(Priority.HIGH) == "HIGH"
        assert priority.label(1) == "LOW"
        assert priority.label(True) is None
        assert describe_annotation(Role).label(Role.ADMIN) == "admin"

    def test_objects(self):
        shape = model_shape(Sample)
        address = shape["address"]
        assert address == ObjectType(Address)
        assert list(address.fields) == ["street", "city"]
        assert shape["extra"] == ObjectType()
        assert shape["extra"].fields == {}

    def test_wrappers(self):
        shape = model_shape(Sample)
        assert shape["nickname"] == OptionalType(NullableType(StringType()))

        score = shape["score"]
        assert isinstance(score, DefaultedType)
        assert score.default() == 5

        created = shape["created"]
        assert isinstance(created, DefaultedType)
        assert created.inner == DateType()
        assert created.default() == datetime.datetime(2024, 1, 1)

    def test_unknown_union(self):
        assert isinstance(model_shape(Sample)["either"], UnknownType)

    def test_tuple_and_bare_collections(self):
        assert describe_annotation(Tuple[int, ...]) == ArrayType(describe_annotation(int))
        assert isinstance(describe_annotation(Tuple[int, str]), UnknownType)
        assert isinstance(describe_annotation(list), ArrayType)

    def test_self_reference_terminates(self):
        children = model_shape(Node)["children"]
        assert isinstance(children, DefaultedType)
        assert children.inner == ArrayType(ObjectType(Node))
        assert "children" in children.inner.element.fields


class TestReferenceMarker:
    """Test cases for reference markers."""

    def test_marker_is_recognised(self):
        assert reference_target(describe_annotation(model_ref("User"))) == "User"

    def test_plain_object_is_not_a_marker(self):
        assert reference_target(ObjectType(Address)) is None
        assert reference_target(StringType()) is None

    def test_marker_requires_fixed_length_id(self):
        assert reference_target(describe_annotation(model_ref("User", id_type=str))) is None
