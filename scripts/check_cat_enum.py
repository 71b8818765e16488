from __future__ import annotations

import ast
import sys
from pathlib import Path

PACKAGE_ROOT = Path("src/dragdrop")


def _load_cat_members(inst_path: Path) -> set[str]:
    mod = ast.parse(inst_path.read_text(encoding="utf-8"))
    for node in mod.body:
        if isinstance(node, ast.ClassDef) and node.name == "Cat":
            return {
                stmt.targets[0].id
                for stmt in node.body
                if isinstance(stmt, ast.Assign)
                and len(stmt.targets) == 1
                and isinstance(stmt.targets[0], ast.Name)
            }
    return set()


def _find_cat_usage(root: Path) -> dict[str, list[tuple[Path, int]]]:
    used: dict[str, list[tuple[Path, int]]] = {}
    for path in sorted(root.rglob("*.py")):
        mod = ast.parse(path.read_text(encoding="utf-8"))
        for node in ast.walk(mod):
            if (
                isinstance(node, ast.Attribute)
                and isinstance(node.value, ast.Name)
                and node.value.id == "Cat"
            ):
                used.setdefault(node.attr, []).append((path, node.lineno))
    return used


def main(argv: list[str]) -> int:
    root = Path(argv[0]) if argv else PACKAGE_ROOT
    inst_path = root / "instrumentation.py"
    if not inst_path.exists():
        print(f"ERROR: instrumentation.py not found under {root}")
        return 2

    members = _load_cat_members(inst_path)
    used = _find_cat_usage(root)
    # attribute access on the enum class itself (Cat.value etc.) is not a member
    missing = sorted(n for n in used if n not in members and not n.startswith("_"))
    unused = sorted(members - set(used))

    for name in unused:
        print(f"NOTE: Cat.{name} is defined but never referenced")

    if not missing:
        print(f"OK: {len(used)} Cat member(s) referenced, all defined.")
        return 0

    print("ERROR: Missing Cat enum entries:")
    for name in missing:
        for path, line in used[name]:
            print(f"  {name}: {path}:{line}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
