"""
Pytest configuration and shared fixtures.
"""
import logging

import pytest

from browser2pdf.stylesheet import StylesheetCache
from tests.helpers import FakeRenderer


@pytest.fixture
def fake_renderer():
    return FakeRenderer()


@pytest.fixture
def stylesheet_cache(tmp_path):
    return StylesheetCache(tmp_path / "xslt-cache")


@pytest.fixture(autouse=True)
def reset_package_log_level():
    yield
    logging.getLogger("browser2pdf").setLevel(logging.NOTSET)
