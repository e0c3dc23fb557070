"""Shared fixtures: a small moments API document and spec files on disk."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

import pytest
import yaml

from wxapigen.codegen import generate


MOMENTS_BASE_URL = "https://api.example.com/v1"

MOMENTS_SPEC: dict[str, Any] = {
    "openapi": "3.0.1",
    "info": {
        "title": "Moments API",
        "version": "1.2.0",
        "description": "Share short posts with friends",
    },
    "servers": [
        {"url": "https://api.example.com/v1"},
        {"url": "https://staging.example.com/v1"},
    ],
    "paths": {
        "/moment/list": {
            "get": {
                "summary": "List moments",
                "parameters": [
                    {"name": "lastId", "in": "query", "schema": {"type": "integer"}},
                    {"name": "size", "in": "query", "schema": {"type": "integer"}},
                ],
                "responses": {
                    "200": {
                        "description": "A page of moments",
                        "content": {
                            "application/json": {
                                "schema": {
                                    "type": "array",
                                    "items": {"$ref": "#/components/schemas/Moment"},
                                },
                            },
                        },
                    },
                },
            },
        },
        "/moment/{moment-id}": {
            "parameters": [
                {"name": "moment-id", "in": "path", "required": True, "schema": {"type": "string"}},
            ],
            "get": {
                "operationId": "getMoment",
                "parameters": [
                    {"name": "X-Trace-Id", "in": "header", "schema": {"type": "string"}},
                ],
                "responses": {
                    "200": {
                        "description": "The moment",
                        "content": {
                            "application/json": {
                                "schema": {"$ref": "#/components/schemas/Moment"},
                            },
                        },
                    },
                },
            },
            "put": {
                "operationId": "updateMoment",
                "requestBody": {
                    "required": True,
                    "content": {
                        "application/json": {
                            "schema": {"$ref": "#/components/schemas/MomentInput"},
                        },
                        "application/xml": {
                            "schema": {"$ref": "#/components/schemas/MomentInput"},
                        },
                    },
                },
                "responses": {"204": {"description": "Updated"}},
            },
            "x-internal": {"note": "not an HTTP method"},
        },
    },
    "components": {
        "schemas": {
            "Moment": {
                "type": "object",
                "properties": {
                    "id": {"type": "integer"},
                    "text": {"type": "string"},
                    "tags": {"type": "array", "items": {"type": "string"}},
                },
                "required": ["id"],
            },
            "MomentInput": {
                "type": "object",
                "properties": {
                    "id": {"type": "integer", "readOnly": True},
                    "text": {"type": "string", "description": "Body text"},
                },
                "required": ["text"],
            },
        },
    },
}


@pytest.fixture
def moments_spec() -> dict[str, Any]:
    """A fresh copy of the moments document for each test."""
    return copy.deepcopy(MOMENTS_SPEC)


@pytest.fixture
def json_spec_file(tmp_path: Path, moments_spec: dict[str, Any]) -> Path:
    path = tmp_path / "moments.json"
    path.write_text(json.dumps(moments_spec))
    return path


@pytest.fixture
def yaml_spec_file(tmp_path: Path, moments_spec: dict[str, Any]) -> Path:
    path = tmp_path / "moments.yaml"
    path.write_text(yaml.safe_dump(moments_spec, sort_keys=False))
    return path


@pytest.fixture(scope="session")
def moments_client() -> tuple[str, int]:
    """Generated source and method count for the moments document."""
    return generate(copy.deepcopy(MOMENTS_SPEC), MOMENTS_BASE_URL)
