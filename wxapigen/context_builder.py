"""Build the template context from a parsed OpenAPI spec.

Synthesizes one ClientMethod per operation and assembles the context dict
for client.js.j2. Each operation is synthesized independently; the only
cross-operation step is the name reduction in build_context.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from .loader import get_info
from .models import Binding, ClientMethod, DocParam, HeaderEntry, QueryArg, UrlPart
from .naming import local_name, normalize_identifier
from .operations import OperationPlan, iter_operations, plan_operation
from .schema_parser import ObjectOf, deref, infer_type, lookup_schema, resolve_schema_type

logger = logging.getLogger(__name__)

# Options field that carries the request payload
BODY_IDENTIFIER = "requestData"

_PATH_PLACEHOLDER = re.compile(r"\{([^}]+)\}")


def _doc_lines(plan: OperationPlan) -> tuple[str, ...]:
    lines = [
        line.strip()
        for text in (plan.summary, plan.description)
        for line in text.splitlines()
        if line.strip()
    ]
    return tuple(lines) or (f"{plan.method.upper()} {plan.path}",)


def _doc_params(spec: dict[str, Any], plan: OperationPlan) -> tuple[DocParam, ...]:
    params = [
        DocParam(
            name=param.identifier,
            type=resolve_schema_type(spec, param.schema),
            description=param.description,
            optional=not param.required,
        )
        for param in plan.parameters
    ]

    body = plan.body
    if body is None:
        return tuple(params)

    schema = lookup_schema(spec, body.schema)
    params.append(DocParam(
        name=BODY_IDENTIFIER,
        type=infer_type(schema),
        description=body.description or "Request body",
        optional=not body.required,
    ))
    fields = deref(schema)
    if isinstance(fields, ObjectOf):
        for prop in fields.properties:
            if prop.read_only:
                continue
            params.append(DocParam(
                name=f"{BODY_IDENTIFIER}.{prop.name}",
                type=infer_type(prop.schema),
                description=prop.description,
                optional=not prop.required,
            ))
    return tuple(params)


def _url_parts(path: str, variables: dict[str, str]) -> tuple[UrlPart, ...]:
    """Split a path template into literal text and ``{name}`` placeholders."""
    parts: list[UrlPart] = []
    last = 0
    for match in _PATH_PLACEHOLDER.finditer(path):
        if match.start() > last:
            parts.append(UrlPart(path[last:match.start()]))
        parts.append(UrlPart(variables[normalize_identifier(match.group(1))], placeholder=True))
        last = match.end()
    if last < len(path):
        parts.append(UrlPart(path[last:]))
    return tuple(parts)


def _bindings(plan: OperationPlan) -> tuple[Binding, ...]:
    label = f"{plan.method.upper()} {plan.path}"
    required: dict[str, bool] = {}
    owners: dict[str, str] = {}

    for param in plan.parameters:
        identifier = param.identifier
        if identifier in required:
            logger.warning(
                "%s: parameter %r reuses identifier %r of parameter %r",
                label, param.name, identifier, owners[identifier],
            )
            continue
        required[identifier] = param.required
        owners[identifier] = param.name

    for match in _PATH_PLACEHOLDER.finditer(plan.path):
        identifier = normalize_identifier(match.group(1))
        if identifier not in required:
            logger.warning("%s: path placeholder %r has no declared parameter", label, identifier)
            required[identifier] = True
            owners[identifier] = identifier

    if plan.body is not None:
        if BODY_IDENTIFIER in required:
            logger.warning(
                "%s: parameter %r shadows the request body field %r",
                label, owners[BODY_IDENTIFIER], BODY_IDENTIFIER,
            )
        else:
            required[BODY_IDENTIFIER] = plan.body.required

    bindings: list[Binding] = []
    taken: set[str] = set()
    for identifier, is_required in required.items():
        variable = local_name(identifier, taken)
        taken.add(variable)
        bindings.append(Binding(
            identifier,
            required=is_required,
            local=variable if variable != identifier else None,
        ))
    return tuple(bindings)


def _headers(plan: OperationPlan, variables: dict[str, str]) -> tuple[HeaderEntry, ...]:
    headers: list[HeaderEntry] = []
    if plan.body is not None:
        headers.append(HeaderEntry("Content-Type", literal=plan.body.content_type))
    headers += [
        HeaderEntry(param.name, identifier=variables[param.identifier])
        for param in plan.header_params
    ]
    return tuple(headers)


def synthesize_method(spec: dict[str, Any], plan: OperationPlan) -> ClientMethod:
    """Describe the client method for one planned operation."""
    bindings = _bindings(plan)
    variables = {binding.identifier: binding.variable for binding in bindings}
    success = plan.success

    return ClientMethod(
        name=plan.name,
        http_method=plan.method.upper(),
        path=plan.path,
        doc_lines=_doc_lines(plan),
        doc_params=_doc_params(spec, plan),
        returns=resolve_schema_type(spec, success.schema if success else None),
        returns_description=(success.description if success else "") or "response data",
        bindings=bindings,
        url=_url_parts(plan.path, variables),
        query=tuple(QueryArg(param.name, variables[param.identifier]) for param in plan.query_params),
        headers=_headers(plan, variables),
        body_identifier=variables[BODY_IDENTIFIER] if plan.body is not None else None,
    )


def build_context(spec: dict[str, Any], base_url: str) -> dict[str, Any]:
    """Build the full template context from the OpenAPI spec.

    Operations are visited in declaration order. When two derive the same
    method name the later one replaces the earlier.
    """
    methods: dict[str, ClientMethod] = {}

    for path, method, operation, shared in iter_operations(spec):
        plan = plan_operation(spec, path, method, operation, shared)
        client_method = synthesize_method(spec, plan)

        previous = methods.pop(client_method.name, None)
        if previous is not None:
            logger.warning(
                "%s %s redefines method %r from %s %s; the earlier definition is dropped",
                client_method.http_method, client_method.path, client_method.name,
                previous.http_method, previous.path,
            )
        methods[client_method.name] = client_method
        logger.debug("Synthesized %s for %s %s", client_method.name, method.upper(), path)

    return {
        "info": get_info(spec),
        "base_url": base_url,
        "methods": list(methods.values()),
        "method_count": len(methods),
    }
