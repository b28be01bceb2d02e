"""Tests for ServiceResult and ServiceError."""

import json

import pydantic
import pytest

from countrygate.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult(ok=True, op="check_country", data={"outcome": "allowed"})
        assert result.ok is True
        assert result.op == "check_country"
        assert result.data == {"outcome": "allowed"}
        assert result.warnings == []
        assert result.error is None

    def test_error_construction(self) -> None:
        error = ServiceError(code="RESOLUTION_FAILED", message="all providers failed")
        result = ServiceResult(ok=False, op="lookup_country", error=error)
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "RESOLUTION_FAILED"

    def test_json_serialization(self) -> None:
        result = ServiceResult(
            ok=True,
            op="check_country",
            data={"outcome": "blocked", "country_code": "CN"},
            warnings=["Event dispatch failed for post_decision"],
        )
        parsed = json.loads(result.model_dump_json())
        assert parsed["ok"] is True
        assert parsed["data"]["country_code"] == "CN"
        assert parsed["warnings"] == ["Event dispatch failed for post_decision"]

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="test")
        with pytest.raises(pydantic.ValidationError):
            result.ok = False  # type: ignore[misc]


class TestServiceError:
    def test_with_detail(self) -> None:
        error = ServiceError(
            code="RESOLUTION_FAILED",
            message="all providers failed",
            detail={"primary": "ipapi: HTTP 503", "fallback": "ip-api: timed out"},
        )
        assert error.detail["primary"] == "ipapi: HTTP 503"

    def test_default_detail(self) -> None:
        error = ServiceError(code="STORAGE_ERROR", message="bad")
        assert error.detail == {}
