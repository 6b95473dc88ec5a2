#!/usr/bin/env python3
"""Check the layering rules of the examguard package.

Layers and what each may import from inside the package:
- domain/: nothing (models, errors, pure rules)
- config/: nothing (policy values only)
- application/: domain/ and config/ (ports and services)
- infrastructure/: domain/, config/ and application/ (adapters, stubs, logging)
- bootstrap/: everything (wiring)

Usage:
    python scripts/check_imports.py [package_directory]

Exit codes:
    0: No violations found
    1: Violations found
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path

PACKAGE_NAME = "examguard"

ALLOWED_IMPORTS: dict[str, set[str]] = {
    "domain": set(),
    "config": set(),
    "application": {"domain", "config"},
    "infrastructure": {"domain", "config", "application"},
    "bootstrap": {"domain", "config", "application", "infrastructure"},
}

Violation = tuple[str, int, str]


def imported_modules(node: ast.AST) -> list[str]:
    """Absolute module names referenced by an import statement."""
    if isinstance(node, ast.ImportFrom):
        if node.level or node.module is None:
            return []
        return [node.module]
    if isinstance(node, ast.Import):
        return [alias.name for alias in node.names]
    return []


def layer_of_module(module: str) -> str | None:
    """Layer of an ``examguard.<layer>...`` module, None for anything else."""
    parts = module.split(".")
    if len(parts) < 2 or parts[0] != PACKAGE_NAME:
        return None
    return parts[1] if parts[1] in ALLOWED_IMPORTS else None


def layer_of_file(py_file: Path, package_dir: Path) -> str | None:
    try:
        parts = py_file.relative_to(package_dir).parts
    except ValueError:
        return None
    if len(parts) < 2:
        return None
    return parts[0] if parts[0] in ALLOWED_IMPORTS else None


def check_file_imports(py_file: Path, package_dir: Path) -> list[Violation]:
    """Check one file.

    Args:
        py_file: File to check.
        package_dir: Root directory of the examguard package.

    Returns:
        List of (file_path, line_number, message) tuples.
    """
    file_layer = layer_of_file(py_file, package_dir)
    if file_layer is None:
        return []
    try:
        tree = ast.parse(py_file.read_text(encoding="utf-8"), filename=str(py_file))
    except (SyntaxError, UnicodeDecodeError) as e:
        print(f"Warning: Could not parse {py_file}: {e}", file=sys.stderr)
        return []

    allowed = ALLOWED_IMPORTS[file_layer]
    violations: list[Violation] = []
    for node in ast.walk(tree):
        for module in imported_modules(node):
            target = layer_of_module(module)
            if target is None or target == file_layer or target in allowed:
                continue
            violations.append(
                (str(py_file), node.lineno, f"{file_layer} layer cannot import from {target}")
            )
    return violations


def check_import_boundaries(package_dir: Path) -> list[Violation]:
    if not package_dir.exists():
        print(f"Error: Package directory '{package_dir}' does not exist", file=sys.stderr)
        return []
    violations: list[Violation] = []
    for py_file in sorted(package_dir.rglob("*.py")):
        violations.extend(check_file_imports(py_file, package_dir))
    return violations


def format_violations(violations: list[Violation]) -> str:
    lines = ["Import boundary violations found:", ""]
    lines.extend(f"  {path}:{line}: {message}" for path, line, message in sorted(violations))
    lines.append("")
    lines.append(f"Total: {len(violations)} violation(s)")
    return "\n".join(lines)


def main() -> int:
    if len(sys.argv) > 1:
        package_dir = Path(sys.argv[1])
    else:
        package_dir = Path(__file__).parent.parent / PACKAGE_NAME

    violations = check_import_boundaries(package_dir)
    if violations:
        print(format_violations(violations))
        return 1
    print("No import boundary violations found.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
