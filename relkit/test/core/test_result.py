"""Tests for relkit.core.result."""

from __future__ import annotations

import pytest

from relkit.core.result import Err, Ok, Result


def _parse_port(text: str) -> Result[int, str]:
    if not text.isdigit():
        return Err(f"not a number: {text}")
    return Ok(int(text))


class TestOk:
    def test_unwrap_or_keeps_value(self) -> None:
        assert Ok(3).unwrap_or(0) == 3

    def test_map_and_map_err(self) -> None:
        assert Ok(2).map(lambda v: v * 10) == Ok(20)
        assert Ok(2).map_err(str.upper) == Ok(2)


class TestErr:
    def test_unwrap_or_returns_default(self) -> None:
        assert Err("boom").unwrap_or(7) == 7

    def test_map_err_transforms_error(self) -> None:
        assert Err("boom").map_err(str.upper) == Err("BOOM")
        assert Err("boom").map(lambda v: v) == Err("boom")


def test_chained_translation() -> None:
    result = _parse_port("8080").map(lambda port: port + 1).map_err(len)
    assert result == Ok(8081)
    assert _parse_port("http").map(lambda port: port + 1).map_err(len) == Err(18)


def test_pattern_matching() -> None:
    match _parse_port("x"):
        case Err(error):
            assert "not a number" in error
        case Ok(_):
            pytest.fail("expected Err")
