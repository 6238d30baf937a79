"""Shared fixtures: an isolated HOME and canned HTTP responses."""

import json
from unittest.mock import MagicMock

import pytest


@pytest.fixture
def home(tmp_path, monkeypatch):
    """Point ~ at a temp dir with an empty ~/.claude and no relay env vars."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("ANTHROPIC_BASE_URL", raising=False)
    monkeypatch.delenv("ANTHROPIC_AUTH_TOKEN", raising=False)
    (tmp_path / ".claude").mkdir()
    return tmp_path


def make_response(body=None, status=200, raw=None, chunks=None):
    """Streamed response stub; `raw` bytes or `chunks` override the JSON body."""
    resp = MagicMock()
    resp.status_code = status
    if chunks is None:
        chunks = [raw if raw is not None else json.dumps(body).encode()]
    resp.iter_content.side_effect = lambda *args, **kwargs: iter(chunks)
    return resp


@pytest.fixture
def response():
    return make_response
