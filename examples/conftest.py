"""Shared pytest configuration for whisker examples.

``example_app`` runs the ``app.py`` next to the requesting test and exposes
its module-level names as attributes. The script is re-run for every test,
so templates are re-read from disk each time.
"""

import runpy
from pathlib import Path
from types import SimpleNamespace

import pytest


@pytest.fixture
def example_app(request: pytest.FixtureRequest) -> SimpleNamespace:
    app_path = Path(request.path).parent / "app.py"
    namespace = runpy.run_path(str(app_path), run_name=f"example_{app_path.parent.name}")
    return SimpleNamespace(**namespace)
