#!/usr/bin/env python3
"""Single entry point when you have a new openapi.yml.

1. Strips deprecated fields and sets wide mode -> openapi.no-deprecated.yml
2. Generates Mintlify schema snippets -> snippets/api/*.mdx

Usage:
    python bin/update_api.py
    python bin/update_api.py employee shift --input api-reference/openapi.yml

The steps live in strip_deprecated.py and schema_to_mintlify.py.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence

import schema_to_mintlify
import strip_deprecated


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Strip deprecated content, then regenerate the Mintlify schema snippets."
    )
    p.add_argument("schemas", nargs="*", help="Schema names to render (default: the configured list).")
    p.add_argument(
        "--input",
        default=str(strip_deprecated.DEFAULT_INPUT),
        help="Source OpenAPI document.",
    )
    p.add_argument(
        "--output",
        default=None,
        help="Stripped document path (default: <input>.no-deprecated.<ext>).",
    )
    p.add_argument(
        "--output-dir",
        default=str(schema_to_mintlify.SNIPPETS_API_DIR),
        help="Directory the .mdx snippets are written to.",
    )
    p.add_argument("--config", default=None, help="Optional YAML list of schema names.")
    return p.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    input_path = Path(args.input)
    output_path = Path(args.output) if args.output else strip_deprecated.default_output_path(input_path)

    print(f"Step 1: Strip deprecated -> {output_path.name}")
    status = strip_deprecated.main([str(input_path), str(output_path)])
    if status != 0:
        return status

    print(f"\nStep 2: Generate schema snippets -> {args.output_dir}")
    render_args: List[str] = [*args.schemas, "--openapi", str(output_path), "--output-dir", args.output_dir]
    if args.config:
        render_args += ["--config", args.config]
    status = schema_to_mintlify.main(render_args)
    if status != 0:
        return status

    print("\nDone.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
