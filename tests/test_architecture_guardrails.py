from __future__ import annotations

import ast
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]


def _line_count(path: Path) -> int:
    return len(path.read_text(encoding="utf-8", errors="ignore").splitlines())


def _python_files(root: Path):
    for path in root.rglob("*.py"):
        # Keep architecture checks focused on source/test code, not packaged artifacts.
        if "dist" in path.parts or "build" in path.parts:
            continue
        yield path


def _imported_modules(path: Path):
    tree = ast.parse(path.read_text(encoding="utf-8", errors="ignore"))
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                yield alias.name
        elif isinstance(node, ast.ImportFrom) and node.level == 0:
            yield node.module or ""


def _layer_violations(layer: str, forbidden: tuple[str, ...]) -> list[tuple[str, str]]:
    violations: list[tuple[str, str]] = []
    for path in _python_files(ROOT / layer):
        for name in _imported_modules(path):
            if any(name == f or name.startswith(f + ".") for f in forbidden):
                violations.append((str(path.relative_to(ROOT)), name))
    return violations


def test_no_python_module_exceeds_hard_line_limit():
    offenders = []
    for path in _python_files(ROOT):
        lines = _line_count(path)
        if lines > 600:
            offenders.append((str(path.relative_to(ROOT)), lines))
    assert not offenders, f"Modules exceed hard 600-line limit: {offenders}"


def test_core_layer_does_not_import_infra_layer():
    violations = _layer_violations("core", ("infra", "migration", "main"))
    assert not violations, f"Core layer imports infra layer: {violations}"


def test_scheduling_engine_has_no_persistence_or_io_imports():
    violations = _layer_violations(
        "core/services/scheduling",
        ("sqlalchemy", "urllib", "threading", "concurrent", "core.services.task", "core.services.critical_path"),
    )
    assert not violations, f"Scheduling engine must stay pure: {violations}"


def test_task_service_is_split_into_mixins():
    service_path = ROOT / "core" / "services" / "task" / "service.py"
    text = service_path.read_text(encoding="utf-8", errors="ignore")

    assert "from core.services.task.lifecycle import TaskLifecycleMixin" in text
    assert "from core.services.task.dependency import TaskDependencyMixin" in text
    assert "from core.services.task.query import TaskQueryMixin" in text
    assert "def create_task" not in text
    assert "def add_dependency" not in text
