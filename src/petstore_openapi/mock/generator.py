"""Schema-driven fake data.

Walks registered shapes and produces values that conform to them: strings
prefixed with the field name, small positive integers, enums as wire strings,
nested objects and three-item collections. Pass a seed for reproducible output.
"""

import base64
import random
import uuid
from datetime import datetime, timedelta, timezone

from petstore_openapi.registry.schemas import (
    ArrayOf,
    EnumShape,
    HeadersShape,
    MapOf,
    ObjectShape,
    Primitive,
    PrimitiveShape,
    Ref,
    SchemaRegistry,
)


EPOCH = datetime(2020, 1, 1, tzinfo=timezone.utc)
REPEAT_COUNT = 3
MAX_DEPTH = 6


class MockGenerator:
    """Creates schema-conformant fake values from a schema registry."""

    def __init__(self, schemas: SchemaRegistry, seed: int | None = None,
                 repeat_count: int = REPEAT_COUNT, max_depth: int = MAX_DEPTH):
        self.schemas = schemas
        self.seed = seed
        self.repeat_count = repeat_count
        self.max_depth = max_depth
        self.rng = random.Random(seed)

    def create(self, expr, overrides: dict | None = None):
        """Create a value for a type expression (``Primitive``, ``Ref``, ``ArrayOf``, ``MapOf``)."""
        value = self._value(expr, "", 0)
        return self._apply(value, overrides)

    def create_named(self, name: str, overrides: dict | None = None):
        """Create a value for a registered schema; overrides replace top-level fields."""
        value = self._named(name, "", 0)
        return self._apply(value, overrides)

    def _apply(self, value, overrides: dict | None):
        if not overrides:
            return value
        if not isinstance(value, dict):
            raise ValueError("Overrides only apply to object values")
        unknown = set(overrides) - set(value)
        if unknown:
            raise ValueError(f"Unknown fields in overrides: {', '.join(sorted(unknown))}")
        value.update(overrides)
        return value

    def _value(self, expr, hint: str, depth: int):
        if isinstance(expr, Primitive):
            return self._primitive(expr.type, expr.format, hint)
        if isinstance(expr, Ref):
            return self._named(expr.name, hint, depth)
        if isinstance(expr, ArrayOf):
            return [self._value(expr.items, hint, depth + 1) for _ in range(self.repeat_count)]
        if isinstance(expr, MapOf):
            return {
                self._string(hint or "key"): self._value(expr.values, hint, depth + 1)
                for _ in range(self.repeat_count)
            }
        raise TypeError(f"Cannot generate a value for {expr!r}")

    def _named(self, name: str, hint: str, depth: int):
        if depth > self.max_depth:
            return None
        shape = self.schemas.resolve(name)
        if isinstance(shape, EnumShape):
            return self.rng.choice(shape.members).wire
        if isinstance(shape, PrimitiveShape):
            return self._primitive(shape.type, shape.format, hint or name)
        if isinstance(shape, ObjectShape):
            return {f.name: self._value(f.type, f.name, depth + 1) for f in shape.fields}
        if isinstance(shape, HeadersShape):
            return {h.name: self._primitive(h.type.type, h.type.format, h.name) for h in shape.headers}
        raise TypeError(f"Cannot generate a value for schema '{name}'")

    def _primitive(self, type_: str, format: str | None, hint: str):
        if type_ == "integer":
            return self.rng.randint(1, 255)
        if type_ == "number":
            return round(self.rng.uniform(1, 1000), 2)
        if type_ == "boolean":
            return self.rng.random() < 0.5
        if format == "date-time":
            return (EPOCH + timedelta(seconds=self.rng.randint(0, 5 * 365 * 86400))).isoformat()
        if format == "date":
            return (EPOCH + timedelta(days=self.rng.randint(0, 5 * 365))).date().isoformat()
        if format in ("uuid", "guid"):
            return str(self._uuid())
        if format in ("binary", "byte"):
            return base64.b64encode(self.rng.randbytes(16)).decode("ascii")
        return self._string(hint)

    def _string(self, hint: str) -> str:
        return f"{hint}{self._uuid()}"

    def _uuid(self) -> uuid.UUID:
        return uuid.UUID(int=self.rng.getrandbits(128), version=4)
