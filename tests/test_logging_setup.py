# tests/test_logging_setup.py
import asyncio
import importlib
import logging

import pytest

import nedapay.main


def test_import_leaves_root_logger_alone(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    importlib.reload(nedapay.main)

    assert calls == []


def test_startup_configures_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    monkeypatch.setattr(nedapay.main, "create_tables", lambda: None)

    asyncio.run(nedapay.main.on_startup())

    assert len(calls) == 1
    assert calls[0]["level"] == nedapay.main.settings.log_level.upper()
