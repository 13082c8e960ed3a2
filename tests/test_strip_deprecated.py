"""Tests for the deprecated-content filter."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

from strip_deprecated import (
    build_deprecated_schema_names,
    default_output_path,
    ensure_wide_mode,
    main,
    strip_document,
)


def _spec() -> dict[str, Any]:
    return {
        "openapi": "3.1.0",
        "paths": {
            "/shifts": {
                "summary": "Shifts",
                "parameters": [{"name": "limit", "in": "query"}],
                "get": {"operationId": "listShifts", "x-mint": {"href": "/shifts"}},
                "post": {"operationId": "createShift", "deprecated": False},
            },
            "/legacy": {
                "delete": {"operationId": "dropLegacy", "deprecated": True},
                "put": {"operationId": "putLegacy"},
            },
        },
        "components": {
            "schemas": {
                "oldThing": {"type": "object", "deprecated": True},
                "shift": {
                    "type": "object",
                    "deprecated": False,
                    "properties": {
                        "id": {"type": "string"},
                        "legacyCode": {"type": "string", "deprecated": True},
                        "old": {"$ref": "#/components/schemas/oldThing"},
                        "olds": {"type": "array", "items": {"$ref": "#/components/schemas/oldThing"}},
                        "inlineItems": {
                            "type": "array",
                            "items": {"type": "object", "deprecated": True},
                        },
                        "nested": {
                            "type": "object",
                            "properties": {
                                "keep": {"type": "integer", "deprecated": False},
                                "drop": {"type": "integer", "deprecated": True},
                            },
                        },
                    },
                },
            }
        },
    }


def _keys_named(node: Any, key: str) -> int:
    if isinstance(node, dict):
        return (key in node) + sum(_keys_named(v, key) for v in node.values())
    if isinstance(node, list):
        return sum(_keys_named(v, key) for v in node)
    return 0


def test_build_deprecated_schema_names_only_reads_top_level() -> None:
    spec = _spec()
    assert build_deprecated_schema_names(spec) == {"oldThing"}


def test_build_deprecated_schema_names_requires_boolean_true() -> None:
    spec = {"components": {"schemas": {"a": {"deprecated": "true"}, "b": {"deprecated": 1}}}}
    assert build_deprecated_schema_names(spec) == set()


def test_strip_removes_deprecated_objects_and_refs() -> None:
    out = strip_document(_spec())

    schemas = out["components"]["schemas"]
    assert "oldThing" not in schemas
    props = schemas["shift"]["properties"]
    assert list(props) == ["id", "inlineItems", "nested"]
    assert list(props["nested"]["properties"]) == ["keep"]
    assert "dropLegacy" not in str(out)
    assert out["paths"]["/legacy"]["put"]["operationId"] == "putLegacy"


def test_inline_deprecated_items_keep_the_array_property() -> None:
    out = strip_document(_spec())

    # the deprecated items mapping goes, the array property itself stays
    inline = out["components"]["schemas"]["shift"]["properties"]["inlineItems"]
    assert inline == {"type": "array"}


def test_output_never_contains_deprecated_key() -> None:
    spec = _spec()
    spec["deprecated"] = False
    spec["tags"] = [{"name": "old", "deprecated": False}]

    out = strip_document(spec)
    assert _keys_named(out, "deprecated") == 0


def test_wide_mode_set_on_every_operation() -> None:
    out = strip_document(_spec())

    for path_item in out["paths"].values():
        for method in ("get", "post", "put", "delete"):
            if method in path_item:
                assert path_item[method]["x-mint"]["metadata"]["mode"] == "wide"
    assert out["paths"]["/shifts"]["get"]["x-mint"]["href"] == "/shifts"
    assert "x-mint" not in out["paths"]["/shifts"]["parameters"][0]
    assert out["paths"]["/shifts"]["summary"] == "Shifts"


def test_ensure_wide_mode_replaces_non_mapping_placeholders() -> None:
    doc = {"paths": {"/a": {"get": {"x-mint": None}, "trace": {"x-mint": {"metadata": "x"}}}}}
    ensure_wide_mode(doc)
    assert doc["paths"]["/a"]["get"]["x-mint"] == {"metadata": {"mode": "wide"}}
    assert doc["paths"]["/a"]["trace"]["x-mint"] == {"metadata": {"mode": "wide"}}


def test_strip_does_not_mutate_input() -> None:
    spec = _spec()
    original = copy.deepcopy(spec)
    strip_document(spec)
    assert spec == original


def test_strip_is_idempotent() -> None:
    once = strip_document(_spec())
    assert strip_document(once) == once


def test_default_output_path() -> None:
    assert default_output_path(Path("api/openapi.yml")) == Path("api/openapi.no-deprecated.yml")
    assert default_output_path(Path("spec.YAML")) == Path("spec.no-deprecated.YAML")
    assert default_output_path(Path("spec.json")) == Path("spec.no-deprecated.json")
    assert default_output_path(Path("spec.txt")) == Path("spec.txt.no-deprecated")


def test_main_writes_stripped_document(tmp_path: Path, capsys) -> None:
    source = tmp_path / "openapi.yml"
    source.write_text(yaml.safe_dump(_spec(), sort_keys=False), encoding="utf-8")

    assert main([str(source)]) == 0

    written = tmp_path / "openapi.no-deprecated.yml"
    doc = yaml.safe_load(written.read_text(encoding="utf-8"))
    assert doc == strip_document(_spec())
    assert "Wrote openapi.no-deprecated.yml" in capsys.readouterr().out


def test_main_fails_on_missing_input(tmp_path: Path, capsys) -> None:
    assert main([str(tmp_path / "missing.yml")]) == 1
    assert "input file not found" in capsys.readouterr().err


def test_main_fails_on_unparseable_input(tmp_path: Path, capsys) -> None:
    source = tmp_path / "openapi.yml"
    source.write_text("paths: [unclosed\n", encoding="utf-8")

    assert main([str(source), str(tmp_path / "out.yml")]) == 1
    assert capsys.readouterr().err.startswith("error:")
    assert not (tmp_path / "out.yml").exists()
