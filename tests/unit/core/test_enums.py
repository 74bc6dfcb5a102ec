"""Unit tests for core enums."""

import pytest

from laakhay.rest.core import HttpMethod, MaterializeState, MediaType, StatusClass


@pytest.mark.parametrize(
    ("status", "expected"),
    [
        (100, StatusClass.INFORMATIONAL),
        (200, StatusClass.SUCCESS),
        (201, StatusClass.SUCCESS),
        (204, StatusClass.NO_CONTENT),
        (205, StatusClass.NO_CONTENT),
        (301, StatusClass.REDIRECTION),
        (304, StatusClass.NO_CONTENT),
        (404, StatusClass.CLIENT_ERROR),
        (500, StatusClass.SERVER_ERROR),
        (599, StatusClass.SERVER_ERROR),
    ],
)
def test_status_class_of(status, expected):
    """Test status code classification."""
    assert StatusClass.of(status) == expected


@pytest.mark.parametrize("status", [0, 99, 600, 999])
def test_status_class_of_out_of_range(status):
    """Test out-of-range status codes are rejected."""
    with pytest.raises(ValueError, match="Invalid HTTP status code"):
        StatusClass.of(status)


def test_http_method_allows_body():
    """Test GET and HEAD cannot carry a body."""
    assert not HttpMethod.GET.allows_body
    assert not HttpMethod.HEAD.allows_body
    assert HttpMethod.POST.allows_body
    assert HttpMethod.DELETE.allows_body


def test_only_deserialize_state_expects_content():
    """Test expects_content is true only for DESERIALIZE."""
    assert [s for s in MaterializeState if s.expects_content] == [MaterializeState.DESERIALIZE]


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        ("application/json", MediaType.JSON),
        ("application/json; charset=utf-8", MediaType.JSON),
        ("application/problem+json", MediaType.JSON),
        ("text/json", MediaType.JSON),
        ("application/xml", MediaType.XML),
        ("text/xml; charset=iso-8859-1", MediaType.XML),
        ("application/atom+xml", MediaType.XML),
        ("application/x-www-form-urlencoded", MediaType.FORM),
        ("text/plain", MediaType.TEXT),
        ("image/png", None),
        ("", None),
        (None, None),
    ],
)
def test_media_type_from_header(header, expected):
    """Test Content-Type header mapping."""
    assert MediaType.from_header(header) == expected
