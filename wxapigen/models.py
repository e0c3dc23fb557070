"""Language-neutral description of one generated client method.

The context builder produces these values; the templates in ``templates/``
are the only place that knows JavaScript syntax.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DocParam:
    """One ``@param`` line; ``name`` is relative to the options object."""

    name: str
    type: str
    description: str = ""
    optional: bool = True


@dataclass(frozen=True)
class Binding:
    """A field read from the options object into a local variable.

    ``identifier`` is the options field; ``local`` is set only when the
    variable needs a different name.
    """

    identifier: str
    required: bool = False
    local: str | None = None

    @property
    def variable(self) -> str:
        return self.local or self.identifier


@dataclass(frozen=True)
class UrlPart:
    """Literal path text, or a placeholder naming the variable to interpolate."""

    text: str
    placeholder: bool = False


@dataclass(frozen=True)
class QueryArg:
    wire_name: str
    identifier: str


@dataclass(frozen=True)
class HeaderEntry:
    """A header sent with the request: either a fixed value or a bound identifier."""

    key: str
    identifier: str | None = None
    literal: str | None = None


@dataclass(frozen=True)
class ClientMethod:
    name: str
    http_method: str
    path: str
    doc_lines: tuple[str, ...] = ()
    doc_params: tuple[DocParam, ...] = ()
    returns: str = "any"
    returns_description: str = "response data"
    bindings: tuple[Binding, ...] = ()
    url: tuple[UrlPart, ...] = ()
    query: tuple[QueryArg, ...] = ()
    headers: tuple[HeaderEntry, ...] = ()
    body_identifier: str | None = None

    @property
    def placeholders(self) -> tuple[str, ...]:
        return tuple(part.text for part in self.url if part.placeholder)
