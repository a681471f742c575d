from __future__ import annotations

import ast
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]
ENGINE_MODULES = ("engine.py", "graph.py", "passes.py", "slack.py", "results.py", "models.py", "timeline.py")


def _python_files(root: Path):
    for path in root.rglob("*.py"):
        if "dist" in path.parts:
            continue
        yield path


def _imported_modules(path: Path) -> list[str]:
    tree = ast.parse(path.read_text(encoding="utf-8", errors="ignore"))
    names: list[str] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            names.extend(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.level == 0:
            names.append(node.module or "")
    return names


def test_core_layer_does_not_import_infra_layer():
    violations: list[tuple[str, str]] = []
    for path in _python_files(ROOT / "core"):
        for name in _imported_modules(path):
            if name == "infra" or name.startswith("infra."):
                violations.append((str(path.relative_to(ROOT)), name))

    assert not violations, f"Core layer imports infra layer: {violations}"


def test_scheduling_engine_modules_stay_storage_free():
    scheduling_root = ROOT / "core" / "services" / "scheduling"
    violations: list[tuple[str, str]] = []
    for file_name in ENGINE_MODULES:
        path = scheduling_root / file_name
        for name in _imported_modules(path):
            if name.split(".")[0] in {"sqlalchemy", "openpyxl", "matplotlib"}:
                violations.append((file_name, name))

    assert not violations, f"Engine modules depend on storage/reporting libraries: {violations}"
