import os

import pytest

from chainsql.settings import main as settings_main


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Run every test against default settings, unaffected by the host environment."""
    for key in list(os.environ):
        if key.upper().startswith("CHAINSQL_"):
            monkeypatch.delenv(key)
    settings_main._settings = None
    yield
    settings_main._settings = None
