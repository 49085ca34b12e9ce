#!/usr/bin/env python3
"""Validate device signature catalog files.

Usage:
    python scripts/validate_signature.py signatures/extra.json
    python scripts/validate_signature.py path/to/catalog.json [...]
"""

import json
import re
import sys
from pathlib import Path
from typing import Any

REQUIRED_FIELDS = ["name", "patterns", "reason"]

NAME_FORMAT = re.compile(r"^[A-Za-z0-9][A-Za-z0-9 /_-]*$")


def validate_category(category: Any, index: int) -> list[str]:
    """Validate a single category entry. Returns list of errors."""
    if not isinstance(category, dict):
        return [f"categories[{index}]: must be an object"]

    errors = []
    prefix = f"categories[{index}] ({category.get('name', 'UNKNOWN')})"

    # Required fields
    for field in REQUIRED_FIELDS:
        if field not in category:
            errors.append(f"{prefix}: missing required field '{field}'")

    name = category.get("name", "")
    if name and (not isinstance(name, str) or not NAME_FORMAT.match(name)):
        errors.append(f"{prefix}: name should contain only letters, digits, spaces, '/', '_' or '-'")

    patterns = category.get("patterns", [])
    if not isinstance(patterns, list) or not all(isinstance(p, str) for p in patterns):
        errors.append(f"{prefix}: patterns must be a list of strings")
        return errors

    seen: set[str] = set()
    for pattern in patterns:
        if not pattern.strip():
            errors.append(f"{prefix}: empty pattern")
            continue
        if pattern != pattern.strip():
            errors.append(f"{prefix}: pattern '{pattern}' has surrounding whitespace")
        key = pattern.upper()
        if key in seen:
            errors.append(f"{prefix}: duplicate pattern '{pattern}' (patterns ignore case)")
        seen.add(key)

    # Patterns are literal substrings, not regular expressions
    for pattern in patterns:
        if re.search(r"[\^\$\*\?\[\]\(\)\|]", pattern):
            errors.append(f"{prefix}: pattern '{pattern}' looks like a regex; patterns match literally")

    reason = category.get("reason", "")
    if "reason" in category and (not isinstance(reason, str) or len(reason) < 5):
        errors.append(f"{prefix}: reason too short (minimum 5 chars)")

    return errors


def category_warnings(category: Any, index: int) -> list[str]:
    """Check a category for legal but suspicious content. Returns list of warnings."""
    if not isinstance(category, dict):
        return []

    prefix = f"categories[{index}] ({category.get('name', 'UNKNOWN')})"
    patterns = category.get("patterns", [])
    if isinstance(patterns, list) and not patterns:
        return [f"{prefix}: category has no patterns and will never match"]
    return []


def validate_file(path: Path) -> tuple[int, list[str], list[str]]:
    """Validate a catalog file. Returns (category_count, errors, warnings)."""
    errors = []
    warnings: list[str] = []

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        return 0, [f"Invalid JSON: {e}"], []

    # Handle both formats
    if isinstance(data, list):
        categories = data
    elif isinstance(data, dict):
        categories = data.get("categories", [])
        if "version" not in data:
            errors.append("Missing 'version' field in file metadata")
        if not isinstance(categories, list):
            return 0, ["'categories' must be a list"], []
    else:
        return 0, ["File must contain a JSON array or object with 'categories' key"], []

    # Check for duplicate names
    seen_names: set[str] = set()
    for category in categories:
        if not isinstance(category, dict):
            continue
        name = category.get("name", "")
        if name in seen_names:
            errors.append(f"Duplicate category name: '{name}'")
        seen_names.add(name)

    for i, category in enumerate(categories):
        errors.extend(validate_category(category, i))
        warnings.extend(category_warnings(category, i))

    return len(categories), errors, warnings


def main() -> int:
    if len(sys.argv) < 2:
        print(f"Usage: {sys.argv[0]} <catalog_file.json> [...]")
        return 1

    total_errors = 0
    for filepath in sys.argv[1:]:
        path = Path(filepath)
        if not path.exists():
            print(f"ERROR: File not found: {path}")
            total_errors += 1
            continue

        count, errors, warnings = validate_file(path)

        for warning in warnings:
            print(f"WARNING: {path}: {warning}")

        if errors:
            print(f"\n{path}: {count} categories, {len(errors)} error(s)")
            for err in errors:
                print(f"  - {err}")
            total_errors += len(errors)
        else:
            print(f"{path}: {count} categories, all valid")

    if total_errors > 0:
        print(f"\nTotal errors: {total_errors}")
        return 1

    print("\nAll catalogs valid.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
