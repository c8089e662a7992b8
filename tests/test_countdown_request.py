import pytest
from pydantic import ValidationError

from countdown_gif.schemas.countdown import CountdownRequest


def test_defaults():
    request = CountdownRequest(time="2030-01-01T00:00:00")
    assert (request.width, request.height, request.frames, request.name) == (645, 120, 30, "default")
    assert request.filename == "default.gif"


def test_none_means_default():
    request = CountdownRequest(time="x", width=None, height=None, frames=None, name=None)
    assert (request.width, request.height, request.frames, request.name) == (645, 120, 30, "default")


@pytest.mark.parametrize(
    "field, value, expected",
    [
        ("width", 10, 150),
        ("width", 1000, 645),
        ("width", 300, 300),
        ("height", 0, 120),
        ("height", 900, 500),
        ("frames", 0, 1),
        ("frames", 200, 90),
        ("frames", -5, 1),
    ],
)
def test_values_are_clamped(field, value, expected):
    request = CountdownRequest(time="x", **{field: value})
    assert getattr(request, field) == expected


def test_clamped_request_equals_boundary_request():
    assert CountdownRequest(time="x", width=10) == CountdownRequest(time="x", width=150)


def test_numeric_strings_are_coerced():
    assert CountdownRequest(time="x", width="200").width == 200


def test_request_is_immutable():
    request = CountdownRequest(time="x")
    with pytest.raises(ValidationError):
        request.width = 200


@pytest.mark.parametrize("name", ["../escape", "a/b", "..", "  "])
def test_name_cannot_leave_directory(name):
    request = CountdownRequest(time="x", name=name)
    assert "/" not in request.name
    assert request.name not in ("", ".", "..")
