"""Shared helpers for loading, writing and navigating an OpenAPI document.

Documents are plain Python trees (dicts, lists and scalars) as produced by
PyYAML or the json module. Mapping order is preserved end to end so the
generated files diff cleanly between runs.
"""

from __future__ import annotations

import json
import re
import sys
from pathlib import Path
from typing import Any, Optional, Union

import yaml


Json = Union[dict[str, Any], list[Any], str, int, float, bool, None]

_SCHEMA_REF_RE = re.compile(r"^#/components/schemas/(.+)$")


_YAML_BOOL_TAG = "tag:yaml.org,2002:bool"


class _OpenAPILoader(yaml.SafeLoader):
    """SafeLoader that only reads true/false as booleans (on/off/yes/no stay strings)."""


_OpenAPILoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _YAML_BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
_OpenAPILoader.add_implicit_resolver(
    _YAML_BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


def _eprint(*args: object) -> None:
    print(*args, file=sys.stderr)


def _decode_json_pointer_token(token: str) -> str:
    # JSON Pointer escaping per RFC 6901
    return token.replace("~1", "/").replace("~0", "~")


def resolve_ref(doc: Json, ref: Any) -> Optional[Json]:
    """
    Return the node an internal ref ("#/a/b") points at, or None.

    Anything that is not a "#/..." string is not a reference. Missing keys
    and non-mapping intermediate nodes also resolve to None.
    """
    if not isinstance(ref, str) or not ref.startswith("#/"):
        return None
    cur: Json = doc
    for raw_token in ref[2:].split("/"):
        if not isinstance(cur, dict):
            return None
        token = _decode_json_pointer_token(raw_token)
        if token not in cur:
            return None
        cur = cur[token]
    return cur


def get_schema_name_from_ref(ref: Any) -> Optional[str]:
    """Return Name for "#/components/schemas/Name", otherwise None."""
    if not isinstance(ref, str):
        return None
    match = _SCHEMA_REF_RE.match(ref)
    return match.group(1) if match else None


def effective_type(schema: Any) -> Optional[str]:
    """Return the declared type, ignoring a "null" entry in a type union."""
    if not isinstance(schema, dict):
        return None
    type_value = schema.get("type")
    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        type_value = non_null[0] if non_null else None
    return type_value if isinstance(type_value, str) else None


def get_component_schemas(doc: Json) -> dict[str, Any]:
    components = doc.get("components") if isinstance(doc, dict) else None
    schemas = components.get("schemas") if isinstance(components, dict) else None
    return schemas if isinstance(schemas, dict) else {}


def schema_ref(schema_name: str) -> str:
    """Internal ref for a component schema name, pointer-escaped."""
    token = schema_name.replace("~", "~0").replace("/", "~1")
    return f"#/components/schemas/{token}"


def _is_json_path(path: Path) -> bool:
    return path.suffix.lower() == ".json"


def load_document(path: Path) -> dict[str, Any]:
    """Parse a JSON or YAML OpenAPI document. Unknown suffixes are read as YAML."""
    with path.open("r", encoding="utf-8") as f:
        if _is_json_path(path):
            doc = json.load(f)
        else:
            doc = yaml.load(f, Loader=_OpenAPILoader)
    if not isinstance(doc, dict):
        raise RuntimeError(
            f"{path} must contain an object at the top-level (got {type(doc).__name__})."
        )
    return doc


def dump_document(doc: Json, path: Path) -> None:
    """Write doc to path in the format implied by its suffix, keeping key order."""
    if _is_json_path(path):
        content = json.dumps(doc, indent=2, ensure_ascii=False, sort_keys=False) + "\n"
    else:
        content = yaml.safe_dump(
            doc,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
            width=float("inf"),
        )
    path.write_text(content, encoding="utf-8")
