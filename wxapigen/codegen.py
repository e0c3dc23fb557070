"""Render templates and write generated output.

Takes the context from context_builder and produces the client module.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import jinja2

from .context_builder import build_context
from .errors import OutputWriteError
from .naming import is_identifier

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"


def js_string(value: Any) -> str:
    """Quote a value as a JavaScript string literal."""
    return json.dumps("" if value is None else str(value))


def js_template(text: str) -> str:
    """Escape literal text placed inside a JavaScript template literal."""
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


def interpolate(identifier: str) -> str:
    return "${" + identifier + "}"


def comment(text: str) -> str:
    """Flatten text onto one line that cannot close a block comment."""
    return " ".join(str(text).split()).replace("*/", "*\\/")


def braced(text: str) -> str:
    return "{" + text + "}"


def member(name: str) -> str:
    """Property access for a client method name."""
    if is_identifier(name):
        return f".{name}"
    return f"[{js_string(name)}]"


def create_environment() -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    env.filters.update(
        js_string=js_string,
        js_template=js_template,
        interpolate=interpolate,
        comment=comment,
        braced=braced,
        member=member,
    )
    return env


def render_module(context: dict[str, Any]) -> str:
    """Render the client template with a context from build_context."""
    template = create_environment().get_template("client.js.j2")
    return template.render(**context)


def generate(spec: dict[str, Any], base_url: str) -> tuple[str, int]:
    """Generate the client module source; returns (source, method count)."""
    context = build_context(spec, base_url)
    return render_module(context), context["method_count"]


def write_module(source: str, output_path: str | Path) -> Path:
    """Write the module atomically: either the whole file appears or nothing."""
    output_path = Path(output_path)
    tmp_name = None
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=output_path.parent,
            prefix=f".{output_path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(source)
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, output_path)
    except OSError as exc:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise OutputWriteError(f"Failed to write {output_path}: {exc}") from exc

    logger.debug("Wrote %d bytes to %s", len(source), output_path)
    return output_path
