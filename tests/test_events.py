"""Tests for message delta text extraction."""

from types import SimpleNamespace

from services.events import extract_delta_text


def _data(content):
    return SimpleNamespace(delta=SimpleNamespace(content=content))


def test_extracts_first_block_text() -> None:
    data = _data([
        SimpleNamespace(text=SimpleNamespace(value="Hello")),
        SimpleNamespace(text=SimpleNamespace(value="ignored")),
    ])

    assert extract_delta_text(data) == "Hello"


def test_missing_delta_yields_nothing() -> None:
    assert extract_delta_text(SimpleNamespace(delta=None)) is None
    assert extract_delta_text(SimpleNamespace()) is None


def test_empty_content_defaults_to_empty_string() -> None:
    assert extract_delta_text(_data([])) == ""
    assert extract_delta_text(_data(None)) == ""


def test_non_text_block_defaults_to_empty_string() -> None:
    image_block = SimpleNamespace(type="image_file", image_file=SimpleNamespace(file_id="file_1"))

    assert extract_delta_text(_data([image_block])) == ""


def test_text_without_value_defaults_to_empty_string() -> None:
    assert extract_delta_text(_data([SimpleNamespace(text=SimpleNamespace(value=None))])) == ""
