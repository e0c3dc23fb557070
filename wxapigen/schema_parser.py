"""Resolve OpenAPI schemas and infer JSDoc types from them.

Raw schema dicts are parsed once into a small tagged variant:

- Reference  a ``$ref`` pointer plus the parsed node it leads to
- Primitive  number, string, boolean or null
- ArrayOf    an array of some item schema
- ObjectOf   an object with ordered properties (none = generic object)
- UnionOf    ``oneOf`` / ``anyOf`` members
- Unknown    anything else, including schemas that failed to resolve

Handles:
- reference-to-reference chains
- nested references in items, properties and compositions
- cyclic references (the repeated pointer degrades to ``any``)
- allOf merging into a single object
- integer/number collapsing to ``number``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Union

from .errors import CyclicReferenceError, MissingSchemaError, UnresolvedReferenceError

logger = logging.getLogger(__name__)

_PRIMITIVES: dict[str, str] = {
    "integer": "number",
    "number": "number",
    "string": "string",
    "boolean": "boolean",
    "null": "null",
}

UNKNOWN_TYPE = "any"


@dataclass(frozen=True)
class Unknown:
    pass


@dataclass(frozen=True)
class Primitive:
    name: str


@dataclass(frozen=True)
class ArrayOf:
    items: SchemaType


@dataclass(frozen=True)
class Property:
    name: str
    schema: SchemaType
    required: bool = False
    read_only: bool = False
    description: str = ""


@dataclass(frozen=True)
class ObjectOf:
    properties: tuple[Property, ...] = ()


@dataclass(frozen=True)
class UnionOf:
    members: tuple[SchemaType, ...]


@dataclass(frozen=True)
class Reference:
    ref: str
    target: SchemaType


SchemaType = Union[Reference, Primitive, ArrayOf, ObjectOf, UnionOf, Unknown]

UNKNOWN = Unknown()


def resolve_ref(spec: dict[str, Any], ref: str) -> Any:
    """Walk a ``$ref`` pointer from the document root.

    Raises UnresolvedReferenceError when a segment is missing.
    """
    parts = ref.split("/")
    if parts and parts[0] == "#":
        parts = parts[1:]

    node: Any = spec
    for part in parts:
        part = part.replace("~1", "/").replace("~0", "~")
        if isinstance(node, dict) and part in node:
            node = node[part]
        elif isinstance(node, list) and part.isdigit() and int(part) < len(node):
            node = node[int(part)]
        else:
            raise UnresolvedReferenceError(ref, part)
    return node


def _follow(spec: dict[str, Any], ref: str) -> dict[str, Any]:
    target = resolve_ref(spec, ref)
    if not isinstance(target, dict):
        raise UnresolvedReferenceError(ref)
    return target


def resolve_schema(
    spec: dict[str, Any],
    node: Any,
    seen: frozenset[str] = frozenset(),
) -> dict[str, Any]:
    """Follow ``$ref`` pointers until a non-reference node is reached."""
    if not isinstance(node, dict):
        raise MissingSchemaError("No schema given")
    ref = node.get("$ref")
    if ref is None:
        return node
    if ref in seen:
        raise CyclicReferenceError(ref)
    return resolve_schema(spec, _follow(spec, ref), seen | {ref})


def parse_schema(
    spec: dict[str, Any],
    node: Any,
    seen: frozenset[str] = frozenset(),
) -> SchemaType:
    """Parse a raw schema dict into a SchemaType.

    ``seen`` holds the pointers already followed on the way down; meeting one
    again raises CyclicReferenceError. Nested schemas go through
    :func:`lookup_schema`, so a broken property only degrades that property.
    """
    if not isinstance(node, dict):
        raise MissingSchemaError("No schema given")

    if "$ref" in node:
        ref = node["$ref"]
        if ref in seen:
            raise CyclicReferenceError(ref)
        return Reference(ref, parse_schema(spec, _follow(spec, ref), seen | {ref}))

    if "allOf" in node:
        return _merge_all_of(spec, node, seen)

    for key in ("oneOf", "anyOf"):
        if key in node:
            return UnionOf(tuple(lookup_schema(spec, sub, seen) for sub in node[key] or []))

    schema_type = node.get("type")
    if schema_type == "array":
        return ArrayOf(lookup_schema(spec, node.get("items"), seen))
    if schema_type == "object" or (schema_type is None and "properties" in node):
        return ObjectOf(_parse_properties(spec, node, seen))
    if isinstance(schema_type, str) and schema_type in _PRIMITIVES:
        return Primitive(_PRIMITIVES[schema_type])
    return UNKNOWN


def _parse_properties(
    spec: dict[str, Any],
    node: dict[str, Any],
    seen: frozenset[str],
) -> tuple[Property, ...]:
    required = node.get("required")
    required_fields = set(required) if isinstance(required, list) else set()
    properties = []
    for name, raw in (node.get("properties") or {}).items():
        meta = raw if isinstance(raw, dict) else {}
        properties.append(Property(
            name=str(name),
            schema=lookup_schema(spec, raw, seen),
            required=name in required_fields,
            read_only=bool(meta.get("readOnly", False)),
            description=str(meta.get("description") or ""),
        ))
    return tuple(properties)


def _merge_all_of(
    spec: dict[str, Any],
    node: dict[str, Any],
    seen: frozenset[str],
) -> SchemaType:
    """Merge allOf members (and the node's own properties) into one object."""
    members = [lookup_schema(spec, sub, seen) for sub in node["allOf"] or []]
    if "properties" in node:
        members.append(ObjectOf(_parse_properties(spec, node, seen)))

    objects = [m for m in map(deref, members) if isinstance(m, ObjectOf)]
    if not objects:
        return members[0] if len(members) == 1 else UNKNOWN

    merged: dict[str, Property] = {}
    for obj in objects:
        for prop in obj.properties:
            if prop.name in merged and merged[prop.name].required:
                prop = Property(prop.name, prop.schema, True, prop.read_only, prop.description)
            merged[prop.name] = prop
    return ObjectOf(tuple(merged.values()))


def lookup_schema(
    spec: dict[str, Any],
    node: Any,
    seen: frozenset[str] = frozenset(),
) -> SchemaType:
    """Parse a schema, degrading lookup failures to Unknown.

    A missing schema degrades silently; an unresolved or cyclic reference
    logs a warning. Neither error escapes this function.
    """
    try:
        return parse_schema(spec, node, seen)
    except MissingSchemaError:
        return UNKNOWN
    except UnresolvedReferenceError as exc:
        logger.warning("%s", exc)
        return UNKNOWN


def deref(schema: SchemaType) -> SchemaType:
    """Strip Reference wrappers."""
    while isinstance(schema, Reference):
        schema = schema.target
    return schema


def infer_type(schema: SchemaType) -> str:
    """Render a SchemaType as a JSDoc type string."""
    schema = deref(schema)

    if isinstance(schema, ArrayOf):
        return f"Array<{infer_type(schema.items)}>"

    if isinstance(schema, ObjectOf):
        if not schema.properties:
            return "object"
        fields = [
            f"{prop.name}{'' if prop.required else '?'}: {infer_type(prop.schema)}"
            for prop in schema.properties
        ]
        return "{" + ", ".join(fields) + "}"

    if isinstance(schema, UnionOf):
        members = list(dict.fromkeys(infer_type(m) for m in schema.members))
        return "|".join(members) if members else UNKNOWN_TYPE

    if isinstance(schema, Primitive):
        return schema.name

    return UNKNOWN_TYPE


def resolve_schema_type(spec: dict[str, Any], node: Any) -> str:
    """Resolve a raw OpenAPI schema straight to a JSDoc type string."""
    return infer_type(lookup_schema(spec, node))
