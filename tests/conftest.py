"""Shared fixtures: keep the request log out of the project directory."""

import pytest

from dicevoice.commands import router


@pytest.fixture(autouse=True)
def _request_log(tmp_path, monkeypatch):
    path = tmp_path / "dicevoice.log"
    monkeypatch.setattr(router, "_LOG_PATH", str(path))
    return path
