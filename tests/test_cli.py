"""
Tests for the command line entry point.
"""

import pytest
import uvicorn

from finfusion import cli


def test_serve_runs_app_under_uvicorn(monkeypatch) -> None:
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    cli.main(["serve", "--port", "9001"])

    assert calls == [
        ("finfusion.main:app", {"host": "127.0.0.1", "port": 9001, "reload": False})
    ]


def test_command_is_required() -> None:
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])
