import pytest
from traverson.core.media import HAL_JSON, MediaType


def test_parse_lowercases_and_keeps_parameters():
    mt = MediaType.parse("Application/HAL+JSON; charset=UTF-8")
    assert mt.type == "application"
    assert mt.subtype == "hal+json"
    assert mt.parameters == {"charset": "UTF-8"}
    assert mt.suffix == "json"
    assert str(mt) == "application/hal+json;charset=UTF-8"


def test_parse_rejects_garbage():
    with pytest.raises(ValueError):
        MediaType.parse("not-a-media-type")
    with pytest.raises(ValueError):
        MediaType.parse("")
    assert MediaType.parse_optional("nonsense") is None
    assert MediaType.parse_optional(None) is None


def test_equality_ignores_parameters():
    assert MediaType.parse("application/hal+json;charset=UTF-8") == HAL_JSON


def test_includes_and_compatibility():
    assert MediaType.parse("*/*").includes(HAL_JSON)
    assert MediaType.parse("application/*").includes(HAL_JSON)
    assert MediaType.parse("application/*+json").includes(HAL_JSON)
    assert not HAL_JSON.includes(MediaType.parse("application/json"))
    assert HAL_JSON.is_compatible_with(MediaType.parse("application/*"))
    assert not HAL_JSON.is_compatible_with(MediaType.parse("text/html"))
    assert not HAL_JSON.is_compatible_with(None)


def test_is_json():
    assert HAL_JSON.is_json
    assert MediaType.parse("application/json").is_json
    assert not MediaType.parse("text/plain").is_json
