from __future__ import annotations

import argparse
import ast
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

SRC_ROOT = Path(__file__).resolve().parents[1] / "src" / "rpos"

# Imports each layer must never reach for, keyed by layer directory.
LAYER_POLICIES: dict[str, frozenset[str]] = {
    "domain": frozenset(
        {
            "fastapi",
            "pydantic",
            "sqlalchemy",
            "redis",
            "httpx",
            "starlette",
            "opentelemetry",
            "prometheus_client",
            "rpos.application",
            "rpos.api",
            "rpos.infrastructure",
        }
    ),
    "application": frozenset(
        {
            "fastapi",
            "sqlalchemy",
            "redis",
            "starlette",
            "rpos.api",
            "rpos.infrastructure",
        }
    ),
}


@dataclass(frozen=True)
class Violation:
    file_path: Path
    line: int
    module: str


def _python_files(root: Path) -> Iterable[Path]:
    if root.is_file() and root.suffix == ".py":
        yield root
        return
    if root.is_dir():
        yield from sorted(root.rglob("*.py"))


def _matches_forbidden(module: str, forbidden_modules: frozenset[str]) -> bool:
    for forbidden in forbidden_modules:
        if module == forbidden or module.startswith(f"{forbidden}."):
            return True
    return False


def _scan_file(file_path: Path, forbidden_modules: frozenset[str]) -> list[Violation]:
    tree = ast.parse(file_path.read_text(encoding="utf-8"), filename=str(file_path))
    violations: list[Violation] = []

    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                if _matches_forbidden(alias.name, forbidden_modules):
                    violations.append(
                        Violation(file_path=file_path, line=node.lineno, module=alias.name)
                    )
        elif isinstance(node, ast.ImportFrom) and node.module:
            if _matches_forbidden(node.module, forbidden_modules):
                violations.append(
                    Violation(file_path=file_path, line=node.lineno, module=node.module)
                )

    return violations


def find_violations(
    paths: Sequence[Path],
    forbidden_modules: frozenset[str] = LAYER_POLICIES["domain"],
) -> list[Violation]:
    violations: list[Violation] = []
    for path in paths:
        for file_path in _python_files(path):
            violations.extend(_scan_file(file_path, forbidden_modules))
    return violations


def check_layers(src_root: Path = SRC_ROOT) -> list[Violation]:
    violations: list[Violation] = []
    for layer, forbidden_modules in LAYER_POLICIES.items():
        violations.extend(find_violations([src_root / layer], forbidden_modules))
    return violations


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Dependency policy check for the rpos domain and application layers."
    )
    parser.add_argument(
        "--path",
        action="append",
        default=[],
        help="Path to scan with the domain policy (repeatable). Defaults to every layer.",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    if args.path:
        violations = find_violations([Path(item) for item in args.path])
    else:
        violations = check_layers()

    if not violations:
        print("depcheck passed")
        return 0

    print("depcheck failed: forbidden imports detected")
    for violation in violations:
        print(f"{violation.file_path}:{violation.line} -> {violation.module}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
