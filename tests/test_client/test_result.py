"""Tests for DecodeResult."""

from __future__ import annotations

import httpx
import pytest

from fetchkit.client import DecodeResult
from fetchkit.exceptions import EmptyBodyError, TransportError


class TestDecodeResult:
    def test_success(self) -> None:
        response = httpx.Response(200, json=[1])
        result = DecodeResult.success([1], response)
        assert result.ok
        assert result.value == [1]
        assert result.error is None
        assert result.response is response
        assert result.unwrap() == [1]

    def test_failure(self) -> None:
        error = TransportError("offline")
        result = DecodeResult.failure(error)
        assert not result.ok
        assert result.value is None
        assert result.response is None
        with pytest.raises(TransportError) as exc_info:
            result.unwrap()
        assert exc_info.value is error

    def test_none_value_is_still_success(self) -> None:
        assert DecodeResult.success(None).ok

    def test_value_and_error_are_exclusive(self) -> None:
        with pytest.raises(ValueError):
            DecodeResult(value={"id": 1}, error=EmptyBodyError())

    def test_is_immutable(self) -> None:
        result = DecodeResult.success(1)
        with pytest.raises(AttributeError):
            result.value = 2  # type: ignore[misc]
