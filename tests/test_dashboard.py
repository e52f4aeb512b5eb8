import ast
from pathlib import Path

import pytest

DASHBOARD = Path(__file__).resolve().parents[1] / "dashboard"
SCRIPTS = sorted([DASHBOARD / "app.py", *(DASHBOARD / "pages").glob("*.py")])


def imported_modules(path: Path) -> set[str]:
    tree = ast.parse(path.read_text(encoding="utf-8"))
    return {node.module for node in ast.walk(tree) if isinstance(node, ast.ImportFrom) and node.module}


@pytest.mark.parametrize("script", SCRIPTS, ids=lambda p: p.name)
def test_pages_import_queries_from_dashboard_package(script):
    modules = imported_modules(script)

    assert "dashboard.data.queries" in modules
    assert "data.queries" not in modules
