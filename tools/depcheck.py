from __future__ import annotations

import argparse
import ast
import sys
from pathlib import Path
from typing import Iterator, NamedTuple

PACKAGE_ROOT = Path(__file__).resolve().parents[1] / "src" / "dinecore"

FRAMEWORKS = frozenset({"fastapi", "starlette", "redis", "httpx", "requests"})
THIRD_PARTY = FRAMEWORKS | {"pydantic", "opentelemetry", "prometheus_client"}
OUTER_LAYERS = frozenset({"dinecore.api", "dinecore.infrastructure"})

# Each layer may only reach inward.
LAYER_RULES: dict[str, frozenset[str]] = {
    "domain": THIRD_PARTY | OUTER_LAYERS | {"dinecore.application"},
    "application": FRAMEWORKS | OUTER_LAYERS,
}


class Violation(NamedTuple):
    layer: str
    file_path: Path
    line: int
    module: str

    def describe(self) -> str:
        return f"[{self.layer}] {self.file_path}:{self.line} imports {self.module}"


def _is_forbidden(module: str, forbidden: frozenset[str]) -> bool:
    head = module.split(".")
    return any(".".join(head[: index + 1]) in forbidden for index in range(len(head)))


def _absolute_imports(source: Path) -> Iterator[tuple[int, str]]:
    tree = ast.parse(source.read_text(encoding="utf-8"), filename=str(source))
    for node in ast.walk(tree):
        if isinstance(node, ast.ImportFrom):
            if node.module and node.level == 0:
                yield node.lineno, node.module
        elif isinstance(node, ast.Import):
            yield from ((node.lineno, alias.name) for alias in node.names)


def scan(layer: str, root: Path) -> list[Violation]:
    forbidden = LAYER_RULES[layer]
    sources = [root] if root.suffix == ".py" else sorted(root.rglob("*.py"))
    return [
        Violation(layer, source, line, module)
        for source in sources
        for line, module in _absolute_imports(source)
        if _is_forbidden(module, forbidden)
    ]


def check_layers(package_root: Path = PACKAGE_ROOT) -> list[Violation]:
    return [
        violation
        for layer in LAYER_RULES
        for violation in scan(layer, package_root / layer)
    ]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Layer import policy for src/dinecore.")
    parser.add_argument(
        "--path",
        type=Path,
        action="append",
        default=[],
        help="Scan only these paths (repeatable). Every layer is checked when omitted.",
    )
    parser.add_argument(
        "--layer",
        choices=sorted(LAYER_RULES),
        default="domain",
        help="Rules applied to --path (default: domain).",
    )
    args = parser.parse_args(argv)

    if args.path:
        violations = [v for path in args.path for v in scan(args.layer, path)]
    else:
        violations = check_layers()

    if violations:
        print(f"depcheck failed: {len(violations)} forbidden import(s)")
        for violation in violations:
            print(violation.describe())
        return 1
    print("depcheck passed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
