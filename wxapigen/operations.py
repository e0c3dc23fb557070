"""Plan each OpenAPI operation before code is synthesized for it.

Walks the document's paths in declaration order and, per operation,
partitions parameters by location, picks the request body's content type
and the success response, and derives the client method name.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterator

from .errors import MissingSchemaError, UnresolvedReferenceError
from .loader import get_paths
from .naming import build_function_name, normalize_identifier
from .schema_parser import resolve_schema

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "post", "put", "delete", "patch", "head", "options")

PARAMETER_LOCATIONS = ("path", "query", "header")

DEFAULT_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class Parameter:
    name: str
    location: str
    required: bool = False
    schema: Any = None
    description: str = ""

    @property
    def identifier(self) -> str:
        return normalize_identifier(self.name)


@dataclass(frozen=True)
class RequestBody:
    content_type: str = DEFAULT_CONTENT_TYPE
    required: bool = False
    description: str = ""
    schema: Any = None


@dataclass(frozen=True)
class SuccessResponse:
    description: str = ""
    schema: Any = None


@dataclass(frozen=True)
class OperationPlan:
    name: str
    method: str
    path: str
    summary: str = ""
    description: str = ""
    path_params: tuple[Parameter, ...] = ()
    query_params: tuple[Parameter, ...] = ()
    header_params: tuple[Parameter, ...] = ()
    body: RequestBody | None = None
    success: SuccessResponse | None = None

    @property
    def parameters(self) -> tuple[Parameter, ...]:
        return self.path_params + self.query_params + self.header_params


def iter_operations(spec: dict[str, Any]) -> Iterator[tuple[str, str, dict, list]]:
    """Yield (path, method, operation, shared_parameters) in declaration order."""
    for path, path_item in get_paths(spec).items():
        if not isinstance(path_item, dict):
            continue
        shared = path_item.get("parameters") or []
        for key, operation in path_item.items():
            method = str(key).lower()
            if method not in HTTP_METHODS or not isinstance(operation, dict):
                continue
            yield path, method, operation, shared


def _resolve_object(spec: dict[str, Any], node: Any, what: str) -> dict[str, Any] | None:
    """Follow a ``$ref`` on a parameter, body or response object."""
    try:
        return resolve_schema(spec, node)
    except MissingSchemaError:
        return None
    except UnresolvedReferenceError as exc:
        logger.warning("%s: %s", what, exc)
        return None


def _merge_parameters(
    spec: dict[str, Any],
    shared: list[Any],
    own: list[Any],
    label: str,
) -> list[dict[str, Any]]:
    """Operation parameters replace path-level ones with the same (name, in)."""
    merged: dict[tuple[str, str], dict[str, Any]] = {}
    for raw in list(shared) + list(own):
        param = _resolve_object(spec, raw, f"{label} parameter")
        if param is None:
            continue
        if "name" not in param:
            logger.warning("%s: skipping parameter without a name", label)
            continue
        key = (str(param["name"]), str(param.get("in", "")))
        merged.pop(key, None)
        merged[key] = param
    return list(merged.values())


def _plan_body(spec: dict[str, Any], raw: Any, label: str) -> RequestBody | None:
    if raw is None:
        return None
    body = _resolve_object(spec, raw, f"{label} request body") or {}
    content = body.get("content") or {}
    # First declared media type wins; dicts keep the document's order
    content_type = next(iter(content), DEFAULT_CONTENT_TYPE)
    media = content.get(content_type) or {}
    return RequestBody(
        content_type=str(content_type),
        required=bool(body.get("required", False)),
        description=str(body.get("description") or ""),
        schema=media.get("schema"),
    )


def _plan_success(spec: dict[str, Any], responses: dict[Any, Any], label: str) -> SuccessResponse | None:
    # YAML loads an unquoted `200:` key as an int
    raw = responses.get("200", responses.get(200))
    if raw is None:
        return None
    response = _resolve_object(spec, raw, f"{label} response") or {}
    content = response.get("content") or {}
    media = next(iter(content.values()), None) or {}
    return SuccessResponse(
        description=str(response.get("description") or ""),
        schema=media.get("schema"),
    )


def plan_operation(
    spec: dict[str, Any],
    path: str,
    method: str,
    operation: dict[str, Any],
    shared_parameters: list[Any] | None = None,
) -> OperationPlan:
    """Partition an operation's parameters and derive its method name."""
    label = f"{method.upper()} {path}"
    groups: dict[str, list[Parameter]] = {location: [] for location in PARAMETER_LOCATIONS}

    for param in _merge_parameters(spec, shared_parameters or [], operation.get("parameters") or [], label):
        location = param.get("in")
        if location not in groups:
            logger.warning("%s: ignoring %s parameter %r", label, location, param["name"])
            continue
        groups[location].append(Parameter(
            name=str(param["name"]),
            location=location,
            required=bool(param.get("required", False)),
            schema=param.get("schema"),
            description=str(param.get("description") or ""),
        ))

    return OperationPlan(
        name=build_function_name(method, path, operation.get("operationId")),
        method=method.lower(),
        path=path,
        summary=str(operation.get("summary") or ""),
        description=str(operation.get("description") or ""),
        path_params=tuple(groups["path"]),
        query_params=tuple(groups["query"]),
        header_params=tuple(groups["header"]),
        body=_plan_body(spec, operation.get("requestBody"), label),
        success=_plan_success(spec, operation.get("responses") or {}, label),
    )
