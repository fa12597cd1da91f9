from __future__ import annotations

import logging

import pytest

from pyswcache.__main__ import main


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("SWCACHE_ORIGIN", "SWCACHE_VERSION"):
        monkeypatch.delenv(name, raising=False)


def test_invalid_origin_exits_with_config_error(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR, logger="pyswcache"):
        assert main(["--origin", "bad"]) == 2
    assert "Invalid configuration" in caplog.text


def test_invalid_origin_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SWCACHE_ORIGIN", "ftp://shop.test")
    assert main([]) == 2
