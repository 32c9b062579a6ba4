"""
Generation of Prisma schema text from pydantic models.

Relations between models are inferred from the models themselves: a field
whose type is another registered model, or a list of one. Registration is
given by two maps, schema -> name and name -> schema. Per pair of models:

* ``A.b: B`` and ``B.a: A``: mutual one-to-one, the model declared later
  owns the foreign key.
* ``A.b: B`` only: one-to-one, ``B`` owns the foreign key ``aId``.
* ``A.b: B`` and ``B.items: List[A]``: one-to-many, ``A`` owns ``bId``.
* ``A.bs: List[B]`` and ``B.as: List[A]``: many-to-many with a shared name.
* ``A.bs: List[B]`` only: one-to-many when ``B`` carries its own ``aId``
  field, otherwise many-to-many with the list mirrored onto ``B``.
"""
import datetime
import enum
import json
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from ..core.config import settings
from ..exceptions import UnsupportedSchemaError
from ..schemas.descriptors import (
    ArrayType, EnumType, FieldDescriptor, FieldKind, LiteralType, NumberType,
    ObjectType, StringType, is_model_class, model_shape
)
from ..schemas.fallbacks import FieldFallback, record_fallback
from ..schemas.unwrap import UnwrappedField, unwrap

logger = logging.getLogger(__name__)

UNSUPPORTED_SCHEMA_MESSAGE = "Only pydantic BaseModel schemas are supported for Prisma model generation."


@dataclass
class PrismaConfig:
    """Configuration for Prisma generation."""
    generator_provider: str = field(default_factory=lambda: settings.PRISMA_GENERATOR_PROVIDER)
    datasource_provider: str = field(default_factory=lambda: settings.PRISMA_DATASOURCE_PROVIDER)
    database_url_env: str = field(default_factory=lambda: settings.PRISMA_DATABASE_URL_ENV)
    indent: str = "  "


@dataclass(frozen=True)
class ModelEntry:
    """One model to render: its Prisma name and its pydantic schema."""
    name: str
    schema: Any


@dataclass
class _ForeignKey:
    """A foreign-key scalar a model must carry."""
    prisma_type: str
    unique: bool = False
    optional: bool = False


@dataclass
class _ModelPlan:
    """Lines and keys a model gains from relations declared on other models."""
    foreign_keys: Dict[str, _ForeignKey] = field(default_factory=dict)
    relation_lines: List[str] = field(default_factory=list)


ModelInput = Union[ModelEntry, Tuple[str, Any], Mapping[str, Any]]


def capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


def lower_first(name: str) -> str:
    return name[:1].lower() + name[1:]


def enum_name(field_name: str) -> str:
    return f"{capitalize(field_name)}Enum"


def _entry(item: ModelInput) -> ModelEntry:
    if isinstance(item, ModelEntry):
        return item
    if isinstance(item, Mapping):
        return ModelEntry(name=item["name"], schema=item["schema"])
    name, schema = item
    return ModelEntry(name=name, schema=schema)


def render_preamble(config: PrismaConfig) -> str:
    """The generator and datasource blocks."""
    indent = config.indent
    return "\n".join([
        "generator client {",
        f'{indent}provider = "{config.generator_provider}"',
        "}",
        "",
        "datasource db {",
        f'{indent}provider = "{config.datasource_provider}"',
        f'{indent}url      = env("{config.database_url_env}")',
        "}",
    ])


def render_default(value: Any, descriptor: FieldDescriptor, dynamic: bool = False) -> Optional[str]:
    """
    Render a default value as a Prisma ``@default`` argument, or None if it has no Prisma form.

    Enum defaults render as the identifier declared in the enum block. Dates
    and uuids map to ``now()`` and ``uuid()`` only when the default is made by
    a factory; a constant date has no Prisma form.
    """
    if value is None:
        return None
    if isinstance(descriptor, EnumType):
        return descriptor.label(value)
    if isinstance(value, enum.Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return json.dumps(value)
    if isinstance(value, (datetime.datetime, datetime.date)):
        return "now()" if dynamic else None
    if isinstance(value, uuid.UUID):
        return "uuid()" if dynamic else json.dumps(str(value))
    return None


class PrismaSchemaGenerator:
    """Renders an ordered list of models into one Prisma schema."""

    def __init__(
        self,
        models: Sequence[ModelInput],
        schema_names: Mapping[Any, str],
        models_by_name: Mapping[str, Any],
        config: Optional[PrismaConfig] = None,
        fallbacks: Optional[List[FieldFallback]] = None
    ) -> None:
        self.entries = [_entry(item) for item in models]
        self.schema_names = schema_names
        self.models_by_name = models_by_name
        self.config = config or PrismaConfig()
        self.fallbacks = fallbacks
        self._enums: Dict[str, Tuple[str, ...]] = {}
        self._shapes: Dict[str, Dict[str, UnwrappedField]] = {}
        self._order: Dict[str, int] = {}

    # --- Model lookup ---

    def _validate(self) -> None:
        for entry in self.entries:
            if not is_model_class(entry.schema):
                raise UnsupportedSchemaError(
                    UNSUPPORTED_SCHEMA_MESSAGE,
                    context={"model": entry.name, "schema": repr(entry.schema)},
                )

    def _schema_of(self, name: str) -> Any:
        for entry in self.entries:
            if entry.name == name:
                return entry.schema
        return self.models_by_name.get(name)

    def _shape(self, name: str) -> Dict[str, UnwrappedField]:
        if name not in self._shapes:
            schema = self._schema_of(name)
            if not is_model_class(schema):
                self._shapes[name] = {}
            else:
                self._shapes[name] = {
                    key: unwrap(descriptor) for key, descriptor in model_shape(schema).items()
                }
        return self._shapes[name]

    def _related_names(self) -> List[str]:
        names = [entry.name for entry in self.entries]
        names.extend(name for name in self.models_by_name if name not in names)
        return names

    def _registered(self, descriptor: FieldDescriptor) -> Optional[str]:
        if isinstance(descriptor, ObjectType) and descriptor.model is not None:
            return self.schema_names.get(descriptor.model)
        return None

    def _single_target(self, field: UnwrappedField) -> Optional[str]:
        return self._registered(field.descriptor)

    def _list_target(self, field: UnwrappedField) -> Optional[str]:
        if isinstance(field.descriptor, ArrayType):
            return self._registered(unwrap(field.descriptor.element).descriptor)
        return None

    def _single_fields(self, owner: str, target: str) -> List[Tuple[str, UnwrappedField]]:
        return [(k, f) for k, f in self._shape(owner).items() if self._single_target(f) == target]

    def _list_fields(self, owner: str, target: str) -> List[Tuple[str, UnwrappedField]]:
        return [(k, f) for k, f in self._shape(owner).items() if self._list_target(f) == target]

    def _implicit_many_to_many(self, owner: str, target: str) -> bool:
        """``owner`` lists ``target`` and ``target`` has no list, field or ``ownerId`` scalar pointing back."""
        return (
            not self._list_fields(target, owner)
            and not self._single_fields(target, owner)
            and f"{lower_first(owner)}Id" not in self._shape(target)
        )

    def _pair_name(self, a: str, b: str) -> str:
        """Relation name for a symmetric pair, ordered by declaration."""
        first, second = sorted((a, b), key=lambda n: self._order.get(n, len(self._order)))
        return f"{first}To{second}"

    def _id_type(self, name: str) -> str:
        id_field = self._shape(name).get("id")
        if id_field is not None and isinstance(id_field.descriptor, NumberType) and id_field.descriptor.is_integer:
            return "Int"
        return "String"

    # --- Relation planning ---

    def _plan(self, name: str) -> _ModelPlan:
        """Foreign keys and relation lines ``name`` gains from other models' fields."""
        plan = _ModelPlan()
        indent = self.config.indent

        for other in self._related_names():
            if other == name:
                continue

            holds_single = self._single_fields(name, other)
            holds_list = self._list_fields(name, other)
            held_single = self._single_fields(other, name)
            held_list = self._list_fields(other, name)

            # This model points at ``other`` through a single field
            for key, field in holds_single:
                if held_list or (held_single and self._order_of(name) > self._order_of(other)):
                    plan.foreign_keys.setdefault(
                        f"{key}Id",
                        _ForeignKey(self._id_type(other), unique=not held_list, optional=field.is_optional),
                    )

            if holds_single or holds_list:
                continue

            # Only ``other`` points at this model
            relation_field = lower_first(other)
            fk = f"{relation_field}Id"
            if held_single:
                plan.foreign_keys.setdefault(fk, _ForeignKey(self._id_type(other), unique=True))
                plan.relation_lines.append(
                    f'{indent}{relation_field} {other} @relation("{other}To{name}", fields: [{fk}], references: [id])'
                )
            elif held_list and fk in self._shape(name):
                optional = "?" if self._shape(name)[fk].is_optional else ""
                plan.relation_lines.append(
                    f"{indent}{relation_field} {other}{optional} @relation(fields: [{fk}], references: [id])"
                )
            elif held_list:
                taken = set(self._shape(name))
                for key, _ in held_list:
                    back = key if key not in taken else f"{relation_field}{capitalize(key)}"
                    taken.add(back)
                    plan.relation_lines.append(
                        f'{indent}{back} {other}[] @relation("{self._pair_name(other, name)}")'
                    )

        return plan

    def _order_of(self, name: str) -> int:
        return self._order.get(name, len(self._order))

    # --- Field rendering ---

    def _fallback(self, model: str, key: str, descriptor: FieldDescriptor, reason: str) -> str:
        record_fallback(self.fallbacks, model, key, getattr(descriptor, "annotation", None), reason)
        return "Json"

    def _scalar_type(self, model: str, key: str, descriptor: FieldDescriptor) -> str:
        kind = descriptor.kind
        if kind is FieldKind.STRING:
            return "String"
        if kind is FieldKind.NUMBER:
            return "Int" if descriptor.is_integer else "Float"
        if kind is FieldKind.BOOLEAN:
            return "Boolean"
        if kind is FieldKind.DATE:
            return "DateTime"
        if kind is FieldKind.ENUM:
            return self._register_enum(key, descriptor)
        if kind is FieldKind.LITERAL:
            return self._literal_type(model, key, descriptor)
        if kind is FieldKind.OBJECT:
            return self._fallback(model, key, descriptor, "embedded object is stored as Json")
        return self._fallback(model, key, descriptor, f"{kind.value} field is stored as Json")

    def _literal_type(self, model: str, key: str, descriptor: LiteralType) -> str:
        value = descriptor.value
        if isinstance(value, bool):
            return "Boolean"
        if isinstance(value, int):
            return "Int"
        if isinstance(value, float):
            return "Float"
        if isinstance(value, str):
            return "String"
        return self._fallback(model, key, descriptor, "literal value has no Prisma scalar type")

    def _register_enum(self, key: str, descriptor: EnumType) -> str:
        name = enum_name(key)
        known = self._enums.get(name)
        if known is None:
            self._enums[name] = descriptor.values
        elif known != descriptor.values:
            logger.warning(f"Enum {name} declared with different values, keeping the first declaration")
        return name

    def _id_line(self, field: UnwrappedField) -> str:
        descriptor = field.descriptor
        if isinstance(descriptor, StringType) and descriptor.has_check("uuid"):
            return "id String @id @default(uuid())"
        if isinstance(descriptor, NumberType) and descriptor.is_integer:
            return "id Int @id @default(autoincrement())"
        if isinstance(descriptor, NumberType):
            return "id Float @id"
        return "id String @id"

    def _field_line(self, model: str, key: str, field: UnwrappedField, plan: _ModelPlan) -> str:
        if key == "id":
            return self._id_line(field)

        descriptor = field.descriptor
        optional = "?" if field.is_optional or field.is_nullable else ""

        target = self._single_target(field)
        if target is not None and target != model:
            return self._single_relation_line(model, key, target, optional)

        target = self._list_target(field)
        if target is not None and target != model:
            if self._list_fields(target, model) or self._implicit_many_to_many(model, target):
                return f'{key} {target}[] @relation("{self._pair_name(model, target)}")'
            return f"{key} {target}[]"

        if target == model or self._single_target(field) == model:
            return f"{key} {self._fallback(model, key, descriptor, 'self-reference is stored as Json')}{optional}"

        if isinstance(descriptor, ArrayType):
            return self._array_line(model, key, descriptor)

        prisma_type = self._scalar_type(model, key, descriptor)
        attributes = []

        fk = plan.foreign_keys.get(key)
        if fk is not None and fk.unique:
            attributes.append("@unique")

        if isinstance(descriptor, LiteralType) and prisma_type != "Json":
            attributes.append(f"@default({render_default(descriptor.value, descriptor)})")
        elif field.has_default and prisma_type != "Json":
            rendered = render_default(field.default, descriptor, field.default_is_dynamic)
            if rendered is not None:
                attributes.append(f"@default({rendered})")

        return " ".join([f"{key} {prisma_type}{optional}", *attributes])

    def _single_relation_line(self, model: str, key: str, target: str, optional: str) -> str:
        fk_name = f"{key}Id"
        held_single = self._single_fields(target, model)
        held_list = self._list_fields(target, model)

        if held_list:
            return f"{key} {target}{optional} @relation(fields: [{fk_name}], references: [id])"
        if held_single and self._order_of(model) > self._order_of(target):
            relation = self._pair_name(model, target)
            return f'{key} {target}{optional} @relation("{relation}", fields: [{fk_name}], references: [id])'
        if held_single:
            return f'{key} {target}{optional} @relation("{self._pair_name(model, target)}")'
        return f'{key} {target}{optional} @relation("{model}To{target}")'

    def _array_line(self, model: str, key: str, descriptor: ArrayType) -> str:
        element = unwrap(descriptor.element).descriptor
        if element.kind in (FieldKind.STRING, FieldKind.NUMBER, FieldKind.BOOLEAN, FieldKind.DATE, FieldKind.ENUM):
            return f"{key} {self._scalar_type(model, key, element)}[]"
        if element.kind is FieldKind.OBJECT:
            return f"{key} {self._fallback(model, key, descriptor, 'list of embedded objects is stored as Json')}"
        return f"{key} {self._fallback(model, key, descriptor, f'list of {element.kind.value} is stored as Json')}"

    # --- Blocks ---

    def render_model(self, entry: ModelEntry) -> str:
        """Render one ``model`` block."""
        indent = self.config.indent
        plan = self._plan(entry.name)
        shape = self._shape(entry.name)

        lines = [f"model {entry.name} {{"]
        for key, field in shape.items():
            lines.append(f"{indent}{self._field_line(entry.name, key, field, plan)}")

        for fk_name, fk in plan.foreign_keys.items():
            if fk_name in shape:
                continue
            parts = [f"{fk_name} {fk.prisma_type}{'?' if fk.optional else ''}"]
            if fk.unique:
                parts.append("@unique")
            lines.append(f"{indent}{' '.join(parts)}")

        lines.extend(plan.relation_lines)
        lines.append("}")
        return "\n".join(lines)

    def render_enums(self) -> List[str]:
        indent = self.config.indent
        blocks = []
        for name, values in self._enums.items():
            lines = [f"enum {name} {{"]
            lines.extend(f"{indent}{value}" for value in values)
            lines.append("}")
            blocks.append("\n".join(lines))
        return blocks

    def generate(self) -> str:
        """Render the whole schema. Raises before rendering anything if a schema is unsupported."""
        self._validate()
        self._enums.clear()
        self._shapes.clear()
        self._order = {name: index for index, name in enumerate(self._related_names())}

        model_blocks = [self.render_model(entry) for entry in self.entries]
        parts = [render_preamble(self.config), *self.render_enums(), *model_blocks]

        logger.info(f"Generated Prisma schema with {len(model_blocks)} models and {len(self._enums)} enums")
        return "\n\n".join(parts) + "\n"


def generate_prisma_schema(
    models: Iterable[ModelInput],
    schema_names: Optional[Mapping[Any, str]] = None,
    models_by_name: Optional[Mapping[str, Any]] = None,
    *,
    config: Optional[PrismaConfig] = None,
    fallbacks: Optional[List[FieldFallback]] = None
) -> str:
    """
    Generate a Prisma schema.

    Args:
        models: Ordered ``(name, schema)`` pairs, ``ModelEntry`` items or ``{"name", "schema"}`` dicts
        schema_names: Schema -> model name, used to detect relations
        models_by_name: Model name -> schema, used to inspect the other side of a relation
        config: Generator configuration, defaults from settings
        fallbacks: Optional list collecting fields rendered as Json

    Returns:
        The Prisma schema text
    """
    generator = PrismaSchemaGenerator(
        list(models),
        schema_names or {},
        models_by_name or {},
        config=config,
        fallbacks=fallbacks,
    )
    return generator.generate()


__all__ = [
    "PrismaConfig", "ModelEntry", "PrismaSchemaGenerator", "generate_prisma_schema",
    "render_preamble", "render_default", "enum_name", "UNSUPPORTED_SCHEMA_MESSAGE",
]
