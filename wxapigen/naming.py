"""Turn OpenAPI names into JavaScript identifiers and client method names.

Parameter names become identifiers:
  lastId          -> lastId
  X-Request-Id    -> XRequestId
  page_size       -> pageSize
  2fa-code        -> _2faCode

Operations without an operationId are named from method + path:
  GET  /moment/list              -> getMomentList
  POST /users/{userId}/avatar    -> postUsersUseridAvatar
  GET  /                         -> get

Inside a generated method each field is copied into a local variable; names
that would clash with JavaScript keywords or the method's own locals get a
trailing underscore (url -> url_, default -> default_).
"""

from __future__ import annotations

import re
from typing import Any, Collection

_INVALID_CHARS = re.compile(r"[^A-Za-z0-9_$]")
_SEPARATOR_RUN = re.compile(r"_+([A-Za-z])")
_PATH_PARAM_BRACES = re.compile(r"\{([^}]+)\}")
_JS_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

JS_RESERVED = frozenset({
    "arguments", "await", "break", "case", "catch", "class", "const", "continue",
    "debugger", "default", "delete", "do", "else", "enum", "eval", "export",
    "extends", "false", "finally", "for", "function", "if", "implements",
    "import", "in", "instanceof", "interface", "let", "new", "null", "package",
    "private", "protected", "public", "return", "static", "super", "switch",
    "this", "throw", "true", "try", "typeof", "var", "void", "while", "with",
    "yield", "undefined", "NaN", "Infinity",
})

# Names declared or referenced inside every generated method body
GENERATED_NAMES = frozenset({
    "params", "url", "queryString", "options", "request", "BASE_URL", "client",
    "config", "createClient", "wx", "module", "encodeURIComponent", "Promise",
})


def normalize_identifier(raw: str) -> str:
    """Return a valid JavaScript identifier for ``raw``.

    Idempotent: normalizing an already normalized name returns it unchanged.
    """
    name = _INVALID_CHARS.sub("_", raw)
    # `-` was rewritten to `_` above, so one pass covers both separators
    name = _SEPARATOR_RUN.sub(lambda m: m.group(1).upper(), name)
    if not name:
        return "_"
    if name[0].isdigit():
        name = "_" + name
    return name


def is_identifier(name: str) -> bool:
    """Check whether ``name`` can be used after a ``.`` in JavaScript."""
    return bool(_JS_IDENTIFIER.match(name))


def build_function_name(method: str, path: str, operation_id: Any = None) -> str:
    """Build a client method name from an operationId or HTTP method + path."""
    if operation_id:
        return str(operation_id)

    clean_path = _PATH_PARAM_BRACES.sub(r"\1", path.removeprefix("/"))
    parts = clean_path.split("/")
    return method.lower() + "".join(part[:1].upper() + part[1:].lower() for part in parts)


def local_name(identifier: str, taken: Collection[str] = ()) -> str:
    """Return a local variable name for ``identifier``.

    Reserved words, names the generated module already uses, and names in
    ``taken`` get ``_`` appended until the result is free.
    """
    name = identifier
    while name in JS_RESERVED or name in GENERATED_NAMES or name in taken:
        name += "_"
    return name
