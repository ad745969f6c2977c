"""Shared fixtures for the nsflatten test suite."""

import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from nsflatten.interfaces import DiagnosticCollector  # noqa: E402
from nsflatten.syntax.parser import load_module  # noqa: E402
from nsflatten.transforms.root_namespace import RootNamespaceTransform  # noqa: E402


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def read_fixture():
    def _read(*parts: str) -> str:
        return FIXTURES_DIR.joinpath(*parts).read_text(encoding="utf-8")

    return _read


@pytest.fixture
def collector() -> DiagnosticCollector:
    return DiagnosticCollector()


@pytest.fixture
def flatten(collector):
    """Run the root namespace transform over source text and return (output, report)."""

    def _flatten(source, roots=("my",), class_name="Widget", **kwargs):
        module = load_module(source)
        transform = RootNamespaceTransform(roots, class_name, listener=collector, **kwargs)
        report = transform.apply(module)
        return module.render(), report

    return _flatten
