#!/usr/bin/env python3
"""Strip deprecated content from an OpenAPI document and set wide mode on every path.

- Removes any entry whose value is an object marked ``deprecated: true``
- Removes any entry whose value is a $ref (or an array of $ref) to a schema
  that is itself deprecated under ``components.schemas``
- Never writes a ``deprecated`` key, whatever its value was
- Adds ``x-mint.metadata.mode: wide`` to each path operation so Mintlify
  renders the pages in wide mode

Usage:
    python bin/strip_deprecated.py                     # openapi.yml -> openapi.no-deprecated.yml
    python bin/strip_deprecated.py input.yml           # out: input.no-deprecated.yml
    python bin/strip_deprecated.py input.yml out.yml   # explicit in/out
"""

from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from openapi_document import (
    Json,
    _eprint,
    dump_document,
    get_component_schemas,
    get_schema_name_from_ref,
    load_document,
)

ROOT = Path(__file__).resolve().parent.parent
API_REFERENCE_DIR = ROOT / "api-reference"
DEFAULT_INPUT = API_REFERENCE_DIR / "openapi.yml"

DEPRECATED_KEY = "deprecated"

_OPENAPI_METHOD_KEYS: set[str] = {
    "get",
    "put",
    "post",
    "delete",
    "options",
    "head",
    "patch",
    "trace",
}


def build_deprecated_schema_names(doc: Json) -> set[str]:
    """Names of top-level component schemas flagged ``deprecated: true``."""
    names: set[str] = set()
    for name, schema in get_component_schemas(doc).items():
        if isinstance(schema, dict) and schema.get(DEPRECATED_KEY) is True:
            names.add(name)
    return names


def is_ref_to_deprecated_schema(value: Any, deprecated_names: set[str]) -> bool:
    if not isinstance(value, dict) or not deprecated_names:
        return False
    direct = get_schema_name_from_ref(value.get("$ref"))
    if direct is not None and direct in deprecated_names:
        return True
    items = value.get("items")
    if value.get("type") == "array" and isinstance(items, dict) and "$ref" in items:
        item_name = get_schema_name_from_ref(items["$ref"])
        if item_name is not None and item_name in deprecated_names:
            return True
    return False


def strip_deprecated(value: Json, deprecated_names: set[str]) -> Json:
    """
    Return a copy of value without deprecated entries.

    Only mapping values are checked for ``deprecated: true``; arrays are
    filtered solely through the $ref rule on their ``items``.
    """
    if isinstance(value, list):
        return [strip_deprecated(item, deprecated_names) for item in value]
    if not isinstance(value, dict):
        return value

    result: dict[str, Any] = {}
    for key, val in value.items():
        if key == DEPRECATED_KEY:
            continue
        if isinstance(val, dict) and val.get(DEPRECATED_KEY) is True:
            continue
        if is_ref_to_deprecated_schema(val, deprecated_names):
            continue
        result[key] = strip_deprecated(val, deprecated_names)
    return result


def _ensure_mapping(parent: dict[str, Any], key: str) -> dict[str, Any]:
    child = parent.get(key)
    if not isinstance(child, dict):
        child = {}
        parent[key] = child
    return child


def ensure_wide_mode(doc: Json) -> None:
    paths = doc.get("paths") if isinstance(doc, dict) else None
    if not isinstance(paths, dict):
        return
    for path_item in paths.values():
        if not isinstance(path_item, dict):
            continue
        for method, operation in path_item.items():
            if method not in _OPENAPI_METHOD_KEYS or not isinstance(operation, dict):
                continue
            metadata = _ensure_mapping(_ensure_mapping(operation, "x-mint"), "metadata")
            metadata["mode"] = "wide"


def strip_document(doc: Json) -> Json:
    deprecated_names = build_deprecated_schema_names(doc)
    stripped = strip_deprecated(doc, deprecated_names)
    ensure_wide_mode(stripped)
    return stripped


def default_output_path(input_path: Path) -> Path:
    name, count = re.subn(
        r"\.(yml|yaml|json)$", r".no-deprecated.\1", input_path.name, flags=re.IGNORECASE
    )
    if count == 0:
        name = f"{input_path.name}.no-deprecated"
    return input_path.with_name(name)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Strip deprecated fields from an OpenAPI document and set Mintlify wide mode."
    )
    p.add_argument(
        "input",
        nargs="?",
        default=str(DEFAULT_INPUT),
        help=f"OpenAPI YAML/JSON file to read (default: {DEFAULT_INPUT.relative_to(ROOT)}).",
    )
    p.add_argument(
        "output",
        nargs="?",
        default=None,
        help="Where to write the stripped document (default: <input>.no-deprecated.<ext>).",
    )
    return p.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    input_path = Path(args.input)
    output_path = Path(args.output) if args.output else default_output_path(input_path)

    if not input_path.exists():
        _eprint(f"error: input file not found: {input_path}")
        return 1

    try:
        stripped = strip_document(load_document(input_path))
        dump_document(stripped, output_path)
    except Exception as e:
        _eprint(f"error: {e}")
        return 1

    print(f"Wrote {output_path.name} (deprecated removed, wide mode set)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
