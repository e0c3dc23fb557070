"""Load and inspect an OpenAPI document.

Reads the spec from a file or an http(s) URL, parses JSON or YAML, and
extracts the pieces the generator needs: paths, schemas, the base URL.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

import httpx
import yaml

from .errors import SpecFormatError, SpecLoadError

logger = logging.getLogger(__name__)

_SERVER_VARIABLE = re.compile(r"\{([^}]+)\}")


def load_spec(source: str | Path, timeout: float = 30) -> dict[str, Any]:
    """Load the OpenAPI spec from a file path or URL."""
    source = str(source)
    if source.startswith(("http://", "https://")):
        content, hint = _fetch(source, timeout)
    else:
        content, hint = _read(Path(source))
    return _parse_content(content, hint, source)


def _fetch(url: str, timeout: float) -> tuple[str, str | None]:
    logger.debug("Fetching spec from %s", url)
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
    except httpx.HTTPError as exc:
        raise SpecLoadError(f"Failed to fetch {url}: {exc}") from exc
    if not response.is_success:
        raise SpecLoadError(f"Failed to fetch {url}: HTTP {response.status_code}")

    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"
    else:
        hint = _hint_from_suffix(httpx.URL(url).path)
    return response.text, hint


def _read(path: Path) -> tuple[str, str | None]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecLoadError(f"Failed to read {path}: {exc}") from exc
    return content, _hint_from_suffix(path.name)


def _hint_from_suffix(name: str) -> str | None:
    suffix = Path(name).suffix.lower()
    if suffix in (".yaml", ".yml"):
        return "yaml"
    if suffix == ".json":
        return "json"
    return None


def _parse_content(content: str, hint: str | None, source: str) -> dict[str, Any]:
    """Parse JSON or YAML; without a hint, JSON is tried first."""
    if hint == "json":
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise SpecLoadError(f"Invalid JSON in {source}: {exc}") from exc
    elif hint == "yaml":
        data = _load_yaml(content, source)
    else:
        try:
            data = json.loads(content)
        except json.JSONDecodeError:
            data = _load_yaml(content, source)

    if not isinstance(data, dict):
        raise SpecLoadError(f"{source} does not contain an OpenAPI document")
    return data


def _load_yaml(content: str, source: str) -> Any:
    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise SpecLoadError(f"Invalid YAML in {source}: {exc}") from exc


def check_openapi_version(spec: dict[str, Any]) -> str:
    """Return the ``openapi`` version, rejecting anything but 3.0.x."""
    version = spec.get("openapi")
    # YAML reads an unquoted `openapi: 3.0` as a float
    if version is None or not str(version).startswith("3.0"):
        raise SpecFormatError("Only OpenAPI 3.0.x specifications are supported")
    return str(version)


def get_paths(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract paths from the spec."""
    return spec.get("paths") or {}


def get_schemas(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract component schemas from the spec."""
    return (spec.get("components") or {}).get("schemas") or {}


def get_info(spec: dict[str, Any]) -> dict[str, str]:
    info = spec.get("info") or {}
    return {
        "title": str(info.get("title", "")),
        "version": str(info.get("version", "")),
        "description": str(info.get("description") or ""),
    }


def get_base_url(spec: dict[str, Any], override: str | None = None) -> str:
    """Return the override, else the first server URL, else an empty string.

    ``{name}`` placeholders in the server URL are replaced with the default
    of the matching server variable.
    """
    if override:
        return override
    servers = spec.get("servers") or []
    if not servers or not servers[0].get("url"):
        return ""

    server = servers[0]
    variables = server.get("variables") or {}

    def _substitute(match: re.Match[str]) -> str:
        variable = variables.get(match.group(1))
        if variable is None or "default" not in variable:
            logger.warning("Server variable %r has no default", match.group(1))
            return match.group(0)
        return str(variable["default"])

    return _SERVER_VARIABLE.sub(_substitute, server["url"])
