"""Shared fixtures."""

import pytest
import requests


@pytest.fixture
def make_response():
    """Build a real requests.Response with the given body and status."""

    def _make(
        body: str = "",
        status_code: int = 200,
        content_type: str = "text/csv; charset=utf-8",
        url: str = "https://paleobiodb.org/data1.2/occs/list.csv",
    ) -> requests.Response:
        response = requests.Response()
        response.status_code = status_code
        response._content = body.encode("utf-8")
        response.headers["Content-Type"] = content_type
        response.url = url
        response.reason = "OK" if status_code < 400 else "Bad Request"
        return response

    return _make
