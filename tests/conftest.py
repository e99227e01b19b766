from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Optional

import pytest

from xplat_bans.matching.matcher import BanMatcher
from xplat_bans.models import SourceLocation
from xplat_bans.registry.loader import DEFAULT_BAN_FILE, build_registry
from xplat_bans.registry.models import BanRegistry

FIXTURES = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def default_registry() -> BanRegistry:
    return build_registry(default_path=DEFAULT_BAN_FILE)


@pytest.fixture
def default_matcher(default_registry: BanRegistry) -> BanMatcher:
    return BanMatcher(default_registry)


@pytest.fixture
def write_json(tmp_path: Path):
    def _write(name: str, document) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write


def make_registry(
    classes: Optional[Dict[str, str]] = None,
    packages: Optional[Dict[str, str]] = None,
    methods: Optional[Dict[str, Dict[str, str]]] = None,
) -> BanRegistry:
    return BanRegistry(classes=classes, packages=packages, methods=methods, sources=["test"])


def loc(line: int = 1, column: int = 1, file: str = "Test.java") -> SourceLocation:
    return SourceLocation(file=file, line=line, column=column)
