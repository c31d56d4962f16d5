"""Unit tests for response normalization into ApiResult."""

from __future__ import annotations

import httpx

from paperless_mcp.integration.normalizer import normalize, normalize_empty, normalize_task_id
from paperless_mcp.integration.result import ApiError, Failure, Success
from paperless_mcp.models.common import PaginatedResult
from paperless_mcp.models.metadata import Tag

_REQUEST = httpx.Request("GET", "http://paperless.test/api/tags/")


def _response(status: int, **kwargs) -> httpx.Response:
    return httpx.Response(status, request=_REQUEST, **kwargs)


class TestNormalize:
    def test_success_parses_model(self) -> None:
        result = normalize(_response(200, json={"id": 1, "name": "Archive"}), Tag)
        assert isinstance(result, Success)
        assert result.value.name == "Archive"

    def test_unknown_fields_pass_through(self) -> None:
        result = normalize(_response(200, json={"id": 1, "name": "A", "future": 1}), Tag)
        assert isinstance(result, Success)
        assert result.value.model_extra == {"future": 1}

    def test_paginated_generic(self) -> None:
        body = {"count": 1, "next": None, "previous": None, "results": [{"id": 3, "name": "T"}]}
        result = normalize(_response(200, json=body), PaginatedResult[Tag])
        assert isinstance(result, Success)
        assert result.value.results[0].id == 3
        assert result.value.has_more is False

    def test_error_status_keeps_body(self) -> None:
        result = normalize(_response(400, text='{"title": ["too long"]}'), Tag)
        assert isinstance(result, Failure)
        assert result.error.status_code == 400
        assert result.error.message == "Bad Request"
        assert "too long" in result.error.response_body

    def test_empty_body_is_failure(self) -> None:
        result = normalize(_response(200, text=""), Tag)
        assert isinstance(result, Failure)
        assert result.error.message == "Empty response body"

    def test_unparseable_body_is_failure(self) -> None:
        result = normalize(_response(200, text="<html>proxy error</html>"), Tag)
        assert isinstance(result, Failure)
        assert result.error.status_code == 200
        assert result.error.message == "Unparseable response body"
        assert result.error.response_body == "<html>proxy error</html>"

    def test_wrong_shape_is_failure(self) -> None:
        result = normalize(_response(200, json={"unexpected": True}), Tag)
        assert isinstance(result, Failure)


class TestNormalizeEmpty:
    def test_204_is_success(self) -> None:
        assert normalize_empty(_response(204)) == Success(None)

    def test_404_is_failure(self) -> None:
        result = normalize_empty(_response(404, json={"detail": "Not found."}))
        assert isinstance(result, Failure)
        assert result.error.status_code == 404


class TestNormalizeTaskId:
    def test_quoted_string_unwrapped(self) -> None:
        result = normalize_task_id(_response(200, text='"b7e1c2d4-task"\n'))
        assert result == Success("b7e1c2d4-task")

    def test_blank_body_is_failure(self) -> None:
        result = normalize_task_id(_response(200, text='""'))
        assert isinstance(result, Failure)


class TestApiError:
    def test_str_includes_status(self) -> None:
        assert str(ApiError(502, "Bad Gateway")) == "HTTP 502: Bad Gateway"

    def test_network_error_has_status_zero(self) -> None:
        error = ApiError(0, "Request failed: refused")
        assert error.is_network_error
        assert str(error) == "Request failed: refused"

    def test_describe_appends_body(self) -> None:
        assert ApiError(400, "Bad Request", "detail").describe() == "HTTP 400: Bad Request\ndetail"
