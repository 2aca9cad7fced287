"""Schema registry: named data shapes referenced by routes.

Type expressions (``Primitive``, ``Ref``, ``ArrayOf``, ``MapOf``) describe the
type of a field, parameter or body. Named shapes (``PrimitiveShape``,
``EnumShape``, ``ObjectShape``, ``HeadersShape``) are what gets registered.
"""

import logging
from collections.abc import Iterable, Iterator
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from petstore_openapi.registry.errors import DuplicateSchemaError, UnknownSchemaError
from petstore_openapi.registry.lifecycle import Lifecycle

logger = logging.getLogger(__name__)

SCHEMA_REF_PREFIX = "#/components/schemas/"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Primitive(_Frozen):
    """A JSON primitive, e.g. ``integer``/``int64`` or ``string``/``date-time``."""

    kind: Literal["primitive"] = "primitive"
    type: str  # string / integer / number / boolean
    format: str | None = None

    def to_openapi(self) -> dict:
        result = {"type": self.type}
        if self.format:
            result["format"] = self.format
        return result


class Ref(_Frozen):
    """A reference to a registered schema by name."""

    kind: Literal["ref"] = "ref"
    name: str

    def to_openapi(self) -> dict:
        return {"$ref": SCHEMA_REF_PREFIX + self.name}


class ArrayOf(_Frozen):
    kind: Literal["array"] = "array"
    items: "TypeExpr"

    def to_openapi(self) -> dict:
        return {"type": "array", "items": self.items.to_openapi()}


class MapOf(_Frozen):
    """A string-keyed dictionary, e.g. the store inventory."""

    kind: Literal["map"] = "map"
    values: "TypeExpr"

    def to_openapi(self) -> dict:
        return {"type": "object", "additionalProperties": self.values.to_openapi()}


TypeExpr = Annotated[Union[Primitive, Ref, ArrayOf, MapOf], Field(discriminator="kind")]

ArrayOf.model_rebuild()
MapOf.model_rebuild()


def string(format: str | None = None) -> Primitive:
    return Primitive(type="string", format=format)


def int32() -> Primitive:
    return Primitive(type="integer", format="int32")


def int64() -> Primitive:
    return Primitive(type="integer", format="int64")


def number(format: str | None = "double") -> Primitive:
    return Primitive(type="number", format=format)


def boolean() -> Primitive:
    return Primitive(type="boolean")


def date_time() -> Primitive:
    return string("date-time")


def binary() -> Primitive:
    return string("binary")


def ref(name: str) -> Ref:
    return Ref(name=name)


def array_of(items) -> ArrayOf:
    return ArrayOf(items=items)


def map_of(values) -> MapOf:
    return MapOf(values=values)


class PrimitiveShape(_Frozen):
    """A named alias for a primitive type."""

    kind: Literal["primitive"] = "primitive"
    type: str
    format: str | None = None
    description: str = ""

    def to_openapi(self) -> dict:
        result = Primitive(type=self.type, format=self.format).to_openapi()
        if self.description:
            result["description"] = self.description
        return result


class EnumMember(_Frozen):
    name: str  # in-memory identifier, e.g. "Available"
    value: int  # numeric value, e.g. 1
    wire: str  # canonical wire string, e.g. "available"


class EnumShape(_Frozen):
    """An enum whose members serialize as wire strings distinct from their names.

    Names, values and wire strings must each be unique, which makes the
    name <-> wire mapping a bijection.
    """

    kind: Literal["enum"] = "enum"
    members: list[EnumMember]
    description: str = ""

    @model_validator(mode="after")
    def _check_bijection(self):
        if not self.members:
            raise ValueError("enum must declare at least one member")
        for attr in ("name", "value", "wire"):
            seen = [getattr(m, attr) for m in self.members]
            if len(set(seen)) != len(seen):
                raise ValueError(f"enum member {attr}s must be unique")
        return self

    def to_wire(self, member: str | int) -> str:
        """Convert a member name or numeric value to its wire string."""
        numeric = isinstance(member, int) and not isinstance(member, bool)
        for m in self.members:
            if member == m.name or (numeric and member == m.value):
                return m.wire
        raise ValueError(f"'{member}' is not a member of this enum")

    def from_wire(self, wire: str) -> EnumMember:
        for m in self.members:
            if m.wire == wire:
                return m
        raise ValueError(f"'{wire}' is not a valid wire value for this enum")

    def parse(self, text: str, default: EnumMember | None = None) -> EnumMember | None:
        """Lenient lookup by name, wire string or numeric value, ignoring case."""
        folded = text.strip().casefold()
        for m in self.members:
            if folded in (m.name.casefold(), m.wire.casefold(), str(m.value)):
                return m
        return default

    @property
    def wires(self) -> list[str]:
        return [m.wire for m in self.members]

    def to_openapi(self) -> dict:
        result = {"type": "string", "enum": self.wires}
        if self.description:
            result["description"] = self.description
        return result


class FieldSpec(_Frozen):
    name: str
    type: TypeExpr
    required: bool = False
    description: str = ""


class ObjectShape(_Frozen):
    kind: Literal["object"] = "object"
    fields: list[FieldSpec]
    description: str = ""

    @model_validator(mode="after")
    def _check_unique_fields(self):
        names = [f.name for f in self.fields]
        if len(set(names)) != len(names):
            raise ValueError("object field names must be unique")
        return self

    def field(self, name: str) -> FieldSpec:
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(name)

    def to_openapi(self) -> dict:
        result: dict = {"type": "object"}
        required = [f.name for f in self.fields if f.required]
        if required:
            result["required"] = required
        properties = {}
        for f in self.fields:
            prop = f.type.to_openapi()
            if f.description:
                prop["description"] = f.description
            properties[f.name] = prop
        result["properties"] = properties
        if self.description:
            result["description"] = self.description
        return result


class HeaderSpec(_Frozen):
    name: str
    type: Primitive
    description: str = ""

    def to_openapi(self) -> dict:
        result = {}
        if self.description:
            result["description"] = self.description
        result["schema"] = self.type.to_openapi()
        return result


class HeadersShape(_Frozen):
    """A set of response headers, inlined into every response that uses it."""

    kind: Literal["headers"] = "headers"
    headers: list[HeaderSpec]

    def to_openapi(self) -> dict:
        return {h.name: h.to_openapi() for h in self.headers}


SchemaEntry = Annotated[
    Union[PrimitiveShape, EnumShape, ObjectShape, HeadersShape],
    Field(discriminator="kind"),
]


def references(node) -> Iterator[str]:
    """Yield every schema name a type expression or shape refers to directly."""
    if node is None:
        return
    if isinstance(node, Ref):
        yield node.name
    elif isinstance(node, ArrayOf):
        yield from references(node.items)
    elif isinstance(node, MapOf):
        yield from references(node.values)
    elif isinstance(node, ObjectShape):
        for f in node.fields:
            yield from references(f.type)


class SchemaRegistry:
    """Append-only map of schema name -> shape, in registration order."""

    def __init__(self, lifecycle: Lifecycle | None = None):
        self.lifecycle = lifecycle or Lifecycle()
        self._entries: dict[str, SchemaEntry] = {}

    def register(self, name: str, shape: SchemaEntry) -> SchemaEntry:
        self.lifecycle.ensure_open(f"register schema '{name}'")
        if name in self._entries:
            raise DuplicateSchemaError(name)
        self._entries[name] = shape
        logger.debug("Registered schema %s (%s)", name, shape.kind)
        return shape

    def resolve(self, name: str) -> SchemaEntry:
        try:
            return self._entries[name]
        except KeyError:
            raise UnknownSchemaError(name) from None

    def enum(self, name: str) -> EnumShape:
        shape = self.resolve(name)
        if not isinstance(shape, EnumShape):
            raise TypeError(f"Schema '{name}' is not an enum")
        return shape

    def closure(self, names: Iterable[str]) -> str | None:
        """Follow references transitively; return the first name that does not resolve.

        A header set is not a value schema, so a reference landing on one
        does not resolve either.
        """
        pending = list(names)
        visited: set[str] = set()
        while pending:
            name = pending.pop(0)
            if name in visited:
                continue
            visited.add(name)
            if name not in self._entries or isinstance(self._entries[name], HeadersShape):
                return name
            pending.extend(references(self._entries[name]))
        return None

    def items(self) -> list[tuple[str, SchemaEntry]]:
        return list(self._entries.items())

    def names(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)
