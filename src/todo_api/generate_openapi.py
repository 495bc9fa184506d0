"""
Utility script to generate and write the OpenAPI schema for the FastAPI app.

The REST surface is documented by FastAPI itself; this script serializes it to
interfaces/openapi.json (or a path given on the command line) so that API
clients can consume a stable schema without running the server. The GraphQL
schema is written next to it as schema.graphql.

Usage:
    python -m todo_api.generate_openapi [OUTPUT_DIR]
"""
from __future__ import annotations

import json
import os
import sys
from typing import Any, Dict, List, Optional

from .graphql_api import schema as graphql_schema
from .main import app, openapi_tags


def _ensure_tags(schema: Dict[str, Any]) -> None:
    """
    Ensure the OpenAPI schema contains every tag from openapi_tags without
    overriding tag definitions that are already present.
    """
    existing_tags: List[Dict[str, Any]] = schema.get("tags", []) or []
    existing_names = {t.get("name") for t in existing_tags if isinstance(t, dict)}
    for tag in openapi_tags:
        if tag.get("name") not in existing_names:
            existing_tags.append(tag)
    if existing_tags:
        schema["tags"] = existing_tags


def _default_output_dir() -> str:
    # <project_root>/interfaces, with this file at <project_root>/src/todo_api/
    package_dir = os.path.dirname(os.path.abspath(__file__))
    project_root = os.path.dirname(os.path.dirname(package_dir))
    return os.path.join(project_root, "interfaces")


# PUBLIC_INTERFACE
def generate_openapi(output_dir: Optional[str] = None) -> str:
    """Write openapi.json and schema.graphql into output_dir and return the openapi.json path."""
    out_dir = output_dir or _default_output_dir()
    os.makedirs(out_dir, exist_ok=True)

    schema = app.openapi()
    _ensure_tags(schema)

    out_path = os.path.join(out_dir, "openapi.json")
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2, ensure_ascii=False)

    with open(os.path.join(out_dir, "schema.graphql"), "w", encoding="utf-8") as f:
        f.write(graphql_schema.as_str())
        f.write("\n")
    return out_path


def main(argv: Optional[List[str]] = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    out_path = generate_openapi(args[0] if args else None)
    print(f"Wrote OpenAPI schema to: {out_path}")


if __name__ == "__main__":
    main()
