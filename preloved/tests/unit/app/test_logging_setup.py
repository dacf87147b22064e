from __future__ import annotations

import logging

import pytest

from preloved.utils.logging import configure_root, env_level, parse_level


@pytest.mark.parametrize(
    "value, expected",
    [("debug", logging.DEBUG), ("WARNING", logging.WARNING), ("15", 15), (30, 30), ("loud", logging.INFO), (None, logging.INFO)],
)
def test_parse_level(value, expected) -> None:
    assert parse_level(value) == expected


def test_env_level_precedence() -> None:
    assert env_level({}) is None
    assert env_level({"PRELOVED_DEBUG": "yes"}) == logging.DEBUG
    assert env_level({"PRELOVED_LOG_LEVEL": "error", "PRELOVED_DEBUG": "1"}) == logging.ERROR


def test_configure_root_honours_env(monkeypatch) -> None:
    root = logging.getLogger()
    previous = root.level
    monkeypatch.setenv("PRELOVED_LOG_LEVEL", "ERROR")
    try:
        assert configure_root(logging.DEBUG) == logging.ERROR
        assert root.level == logging.ERROR
    finally:
        root.setLevel(previous)
