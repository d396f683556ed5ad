# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Import purity of the hexagonal layers.

Domain modules may use the standard library and numpy only; file
formats live in the adapters.
"""
import ast
from pathlib import Path

import pytest

PACKAGE_ROOT = Path(__file__).resolve().parent.parent / "src" / "orbitwright"

DOMAIN_ALLOWED = {
    'math', 'numpy', 'dataclasses', 'typing', 'enum', 'datetime', 'logging', 'bisect',
}
ADAPTER_ALLOWED = DOMAIN_ALLOWED | {'csv', 'json'}


def _imported_roots(path: Path) -> set[str]:
    tree = ast.parse(path.read_text(encoding="utf-8"))
    roots = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                roots.add(alias.name.split('.')[0])
        elif isinstance(node, ast.ImportFrom) and node.module and node.level == 0:
            roots.add(node.module.split('.')[0])
    return roots


def _modules(layer: str) -> list[Path]:
    return sorted((PACKAGE_ROOT / layer).glob("*.py"))


@pytest.mark.parametrize("path", _modules("domain"), ids=lambda p: p.stem)
def test_domain_module_pure(path):
    forbidden = _imported_roots(path) - DOMAIN_ALLOWED - {'orbitwright'}
    assert not forbidden, f"{path.name} imports {sorted(forbidden)}"


@pytest.mark.parametrize("path", _modules("adapters"), ids=lambda p: p.stem)
def test_adapter_module_pure(path):
    forbidden = _imported_roots(path) - ADAPTER_ALLOWED - {'orbitwright'}
    assert not forbidden, f"{path.name} imports {sorted(forbidden)}"


@pytest.mark.parametrize("path", _modules("domain"), ids=lambda p: p.stem)
def test_domain_does_not_depend_on_adapters(path):
    tree = ast.parse(path.read_text(encoding="utf-8"))
    for node in ast.walk(tree):
        if isinstance(node, ast.ImportFrom) and node.module:
            assert not node.module.startswith('orbitwright.adapters'), \
                f"{path.name} imports {node.module}"
            assert not node.module.startswith('orbitwright.cli'), \
                f"{path.name} imports {node.module}"
