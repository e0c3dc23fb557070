"""Exception hierarchy for wxapigen.

Fatal errors carry an ``exit_code`` and bubble up to the CLI, which prints
them and exits before anything is written. Reference and schema errors are
recoverable: :func:`wxapigen.schema_parser.lookup_schema` catches them and
substitutes the unknown type.

    WxApiGenError            (exit 1)
    +-- ConfigError          (exit 1)
    +-- SpecLoadError        (exit 2)
    +-- SpecFormatError      (exit 3)
    +-- OutputWriteError     (exit 4)
    +-- UnresolvedReferenceError
    |   +-- CyclicReferenceError
    +-- MissingSchemaError
"""

from __future__ import annotations


class WxApiGenError(Exception):
    """Base exception for all wxapigen errors."""

    exit_code: int = 1


class ConfigError(WxApiGenError):
    """An environment setting holds an invalid value."""


class SpecLoadError(WxApiGenError):
    """The spec source could not be read or parsed."""

    exit_code = 2


class SpecFormatError(WxApiGenError):
    """The document is not an OpenAPI 3.0.x specification."""

    exit_code = 3


class OutputWriteError(WxApiGenError):
    """The generated module could not be written."""

    exit_code = 4


class UnresolvedReferenceError(WxApiGenError):
    """A ``$ref`` pointer does not lead to a node in the document."""

    def __init__(self, ref: str, segment: str | None = None):
        self.ref = ref
        self.segment = segment
        if segment is None:
            message = f"Could not resolve reference: {ref}"
        else:
            message = f"Could not resolve reference: {ref} (missing segment {segment!r})"
        super().__init__(message)


class CyclicReferenceError(UnresolvedReferenceError):
    """A ``$ref`` chain leads back to a pointer it already visited."""

    def __init__(self, ref: str):
        super().__init__(ref)
        self.args = (f"Cyclic reference: {ref}",)


class MissingSchemaError(WxApiGenError):
    """A parameter, body or response carries no schema."""
