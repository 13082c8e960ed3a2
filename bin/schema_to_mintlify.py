#!/usr/bin/env python3
"""Generate Mintlify ResponseField/Expandable snippets from OpenAPI component schemas.

Each requested schema is written to ``snippets/api/<name>.mdx``. Nested
objects and arrays of objects are expanded recursively into ``Expandable``
sections so the docs show the full shape of the payload.

Usage:
    python bin/schema_to_mintlify.py [schema1] [schema2] ...
    python bin/schema_to_mintlify.py --config schemas.yaml

If no schema names are passed (and no config file is given), the
SCHEMAS_TO_CONVERT list below is used. Names must match keys under
``components.schemas`` in openapi.no-deprecated.yml.
"""

from __future__ import annotations

import argparse
import html
import json
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

import yaml

from openapi_document import (
    Json,
    _eprint,
    effective_type,
    get_component_schemas,
    get_schema_name_from_ref,
    load_document,
    resolve_ref,
    schema_ref,
)

ROOT = Path(__file__).resolve().parent.parent
OPENAPI_PATH = ROOT / "api-reference" / "openapi.no-deprecated.yml"
SNIPPETS_API_DIR = ROOT / "snippets" / "api"

# Schemas rendered when no names are passed on the command line.
SCHEMAS_TO_CONVERT: List[str] = [
    "employee",
    "periods",
    "shift",
    "demand",
    "employeeAvailabilityConstraint",
    "employeeUtilizationConstraint",
    "cooldownConstraint",
    "consecutiveConstraint",
    "patternConstraint",
    "periodicRestConstraint",
    "periodDistributionConstraint",
]

MAX_ENUM_VALUES = 5
SCALAR_TYPES = {"string", "integer", "number", "boolean"}
INDENT = "  "


@dataclass
class Expandable:
    title: str
    fields: List["ResponseField"] = field(default_factory=list)


@dataclass
class ResponseField:
    """One documented field; ``expandable`` holds its nested fields, if any."""

    name: str
    type: str
    description: str = ""
    required: bool = False
    expandable: Optional[Expandable] = None


def resolve_schema(doc: Json, schema: Any) -> Tuple[Any, Optional[str]]:
    """Follow a $ref once. Returns (schema, referenced schema name or None)."""
    if isinstance(schema, dict) and "$ref" in schema:
        resolved = resolve_ref(doc, schema["$ref"])
        if isinstance(resolved, dict):
            return resolved, get_schema_name_from_ref(schema["$ref"])
    return schema, None


def _display_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, default=str)


def get_type_string(doc: Json, schema: Any, ref_name: Optional[str] = None) -> str:
    """Display type for an already resolved (or inline) schema."""
    if not isinstance(schema, dict):
        return "unknown"
    raw_type = effective_type(schema)

    enum = schema.get("enum")
    if isinstance(enum, list):
        shown = " | ".join(_display_value(v) for v in enum[:MAX_ENUM_VALUES])
        more = " | ..." if len(enum) > MAX_ENUM_VALUES else ""
        return f"string (enum: {shown}{more})"

    if raw_type == "array":
        items = schema.get("items")
        if not isinstance(items, dict):
            items = {}
        item_ref = get_schema_name_from_ref(items.get("$ref"))
        item_schema = resolve_ref(doc, items["$ref"]) if "$ref" in items else items
        if not isinstance(item_schema, dict):
            item_schema = {}
        if item_schema.get("type") == "object" and item_schema.get("properties"):
            return "array of object"
        if item_ref:
            item_type = item_ref
        elif isinstance(item_schema.get("type"), str):
            item_type = item_schema["type"]
        else:
            item_type = "object"
        fmt = f" ({item_schema['format']})" if item_schema.get("format") else ""
        return f"array of {item_type}{fmt}"

    if raw_type == "object":
        return "object"

    if raw_type in SCALAR_TYPES:
        fmt = f" ({schema['format']})" if schema.get("format") else ""
        return f"{raw_type}{fmt}"

    if ref_name:
        return ref_name
    return raw_type or "unknown"


def normalize_description(text: Any) -> str:
    if text is None:
        return ""
    return re.sub(r"\s+", " ", str(text)).strip()


def describe(schema: Any, fallback: Any = None) -> str:
    """
    Single-line description for a field.

    ``schema`` is the resolved schema and ``fallback`` the schema as written
    at the usage site; the resolved one wins for both description and default.
    """
    candidates = [s for s in (schema, fallback) if isinstance(s, dict)]
    text = ""
    for candidate in candidates:
        if candidate.get("description"):
            text = normalize_description(candidate["description"])
            break
    for candidate in candidates:
        if "default" in candidate:
            default = f"Default: {json.dumps(candidate['default'], ensure_ascii=False, default=str)}."
            text = f"{text} {default}" if text else default
            break
    return text


def _has_properties(schema: Any) -> bool:
    return isinstance(schema, dict) and isinstance(schema.get("properties"), dict) and bool(schema["properties"])


def _is_object_schema(schema: Any) -> bool:
    if not isinstance(schema, dict):
        return False
    type_value = schema.get("type")
    if type_value is None:
        return "properties" in schema
    if isinstance(type_value, list):
        return "object" in type_value
    return type_value == "object"


def _ref_of(schema: Any) -> Optional[str]:
    ref = schema.get("$ref") if isinstance(schema, dict) else None
    return ref if isinstance(ref, str) else None


def render_fields(doc: Json, schema: Any, seen: Tuple[str, ...] = ()) -> List[ResponseField]:
    """
    Render the properties of an object schema, in declaration order.

    ``seen`` holds the $ref strings being expanded on the current path; a ref
    back into one of them is rendered as a plain field instead of recursing.
    """
    resolved, _ = resolve_schema(doc, schema)
    ref = _ref_of(schema)
    if ref is not None:
        seen = (*seen, ref)
    if not _is_object_schema(resolved) or not isinstance(resolved.get("properties"), dict):
        return []

    required = resolved.get("required")
    required_names = set(required) if isinstance(required, list) else set()
    fields: List[ResponseField] = []

    for prop_name, prop_schema in resolved["properties"].items():
        prop_resolved, prop_ref = resolve_schema(doc, prop_schema)
        node = ResponseField(
            name=prop_name,
            type=get_type_string(doc, prop_resolved, prop_ref),
            description=describe(prop_resolved, prop_schema),
            required=prop_name in required_names,
        )
        if _ref_of(prop_schema) in seen:
            fields.append(node)
            continue

        is_object = _has_properties(prop_resolved) and (
            _ref_of(prop_schema) is not None or _is_object_schema(prop_resolved)
        )
        if is_object:
            node.expandable = Expandable(
                title=f"{prop_name} – properties",
                fields=render_fields(doc, prop_schema, seen),
            )
        elif effective_type(prop_resolved) == "array":
            items = prop_resolved.get("items")
            item_schema, _ = resolve_schema(doc, items)
            if _has_properties(item_schema) and _ref_of(items) not in seen:
                node.expandable = Expandable(
                    title=f"{prop_name} – item structure",
                    fields=render_fields(doc, items, seen),
                )
        fields.append(node)
    return fields


def render_schema(doc: Json, schema_name: str) -> Optional[ResponseField]:
    """Root field for a component schema, or None when the name is unknown."""
    schemas = get_component_schemas(doc)
    if schema_name not in schemas or not isinstance(schemas[schema_name], dict):
        return None
    schema = schemas[schema_name]
    resolved, _ = resolve_schema(doc, schema)
    seen = (schema_ref(schema_name),)
    if _ref_of(schema) is not None:
        seen = (*seen, _ref_of(schema))

    root = ResponseField(
        name=schema_name,
        type=get_type_string(doc, resolved, schema_name),
        description=describe(resolved, schema),
    )
    if effective_type(resolved) == "object" and _has_properties(resolved):
        root.expandable = Expandable(
            title="properties",
            fields=render_fields(doc, resolved, seen),
        )
    return root


def _attr(value: str) -> str:
    return html.escape(value, quote=True)


def _field_lines(node: ResponseField, indent: str) -> List[str]:
    required = " required" if node.required else ""
    lines = [f'{indent}<ResponseField name="{_attr(node.name)}" type="{_attr(node.type)}"{required}>']
    if node.description:
        lines.append(f"{indent}{INDENT}{node.description}")
    lines.append(f"{indent}</ResponseField>")
    if node.expandable is not None:
        lines.append(f'{indent}<Expandable title="{_attr(node.expandable.title)}">')
        for child in node.expandable.fields:
            lines.extend(_field_lines(child, indent + INDENT))
        lines.append(f"{indent}</Expandable>")
    return lines


def to_mdx(root: ResponseField) -> str:
    """Serialize a root field; its properties are nested inside the ResponseField."""
    lines = [f'<ResponseField name="{_attr(root.name)}" type="{_attr(root.type)}">']
    if root.description:
        lines.append(f"{INDENT}{root.description}")
    if root.expandable is not None:
        lines.append(f'{INDENT}<Expandable title="{_attr(root.expandable.title)}">')
        for child in root.expandable.fields:
            lines.extend(_field_lines(child, INDENT * 2))
        lines.append(f"{INDENT}</Expandable>")
    lines.append("</ResponseField>")
    return "\n".join(lines) + "\n"


def schema_not_found(schema_name: str) -> str:
    return f"<!-- Schema not found: {schema_name} -->\n"


def schema_to_mintlify(doc: Json, schema_name: str) -> str:
    root = render_schema(doc, schema_name)
    if root is None:
        return schema_not_found(schema_name)
    return to_mdx(root)


def load_schema_names(config_path: Path) -> List[str]:
    if not config_path.exists():
        raise SystemExit(f"Configuration file not found: {config_path}.")

    data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or []
    if not isinstance(data, list) or not all(isinstance(name, str) and name for name in data):
        raise SystemExit(f"{config_path.name} must contain a top-level list of schema names.")
    return data


def write_snippets(doc: Json, schema_names: Sequence[str], output_dir: Path) -> List[Path]:
    output_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for name in schema_names:
        root = render_schema(doc, name)
        if root is None:
            _eprint(f"warning: schema not found: {name}")
            content = schema_not_found(name)
        else:
            content = to_mdx(root)
        file_path = output_dir / f"{name}.mdx"
        file_path.write_text(content, encoding="utf-8")
        print(f"Wrote {file_path}")
        written.append(file_path)
    return written


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Generate Mintlify schema snippets from components.schemas."
    )
    p.add_argument(
        "schemas",
        nargs="*",
        help="Schema names to render (default: SCHEMAS_TO_CONVERT or --config).",
    )
    p.add_argument(
        "--openapi",
        default=str(OPENAPI_PATH),
        help="OpenAPI document to read (default: the stripped api-reference document).",
    )
    p.add_argument(
        "--output-dir",
        default=str(SNIPPETS_API_DIR),
        help="Directory the .mdx snippets are written to.",
    )
    p.add_argument(
        "--config",
        default=None,
        help="Optional YAML file holding a top-level list of schema names.",
    )
    return p.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    if args.schemas:
        schema_names = list(args.schemas)
    elif args.config:
        schema_names = load_schema_names(Path(args.config))
    else:
        schema_names = list(SCHEMAS_TO_CONVERT)

    openapi_path = Path(args.openapi)
    if not openapi_path.exists():
        _eprint(f"error: OpenAPI document not found: {openapi_path}")
        return 1

    try:
        doc = load_document(openapi_path)
        write_snippets(doc, schema_names, Path(args.output_dir))
    except Exception as e:
        _eprint(f"error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
