import json

import pytest

from vibestation.config import ConfigError, TransformConfig, TransformError


def test_str_pins_compact_form():
    cfg = TransformConfig("send_stdout", {"id": "test_stdout"})
    assert str(cfg) == '{"type":"send_stdout","settings":{"id":"test_stdout"}}'


def test_str_round_trips_through_json():
    settings = {"separator": "\n", "id": "test_split", "limit": 10}
    cfg = TransformConfig("split_string", settings)
    decoded = json.loads(str(cfg))
    assert decoded == {"type": "split_string", "settings": settings}


def test_str_sorts_setting_keys():
    cfg = TransformConfig("split_string", {"separator": "\n", "id": "test_split"})
    text = str(cfg)
    assert text.index('"id"') < text.index('"separator"')


def test_type_precedes_settings():
    text = str(TransformConfig("assign", {"source": "$.message", "target": "$.foo"}))
    assert text.index('"type"') < text.index('"settings"')


def test_default_settings_are_empty_and_independent():
    first = TransformConfig("decode_base64")
    second = TransformConfig("decode_base64")
    first.settings["id"] = "custom"
    assert second.settings == {}
    assert json.loads(str(second))["settings"] == {}


def test_config_equality_compares_fields():
    assert TransformConfig("delete", {"source": "$.bar"}) == TransformConfig(
        "delete", {"source": "$.bar"}
    )
    assert TransformConfig("delete", {"source": "$.bar"}) != TransformConfig(
        "delete", {"source": "$.baz"}
    )


def test_config_error_is_value_error():
    err = ConfigError("transform missing type field")
    assert isinstance(err, ValueError)
    assert str(err) == "transform missing type field"
    with pytest.raises(ValueError, match="transform missing type field"):
        raise err


def test_transform_error_keeps_message():
    err = TransformError("transform bogus: unsupported transform type")
    assert str(err) == "transform bogus: unsupported transform type"
    with pytest.raises(TransformError, match="unsupported transform type"):
        raise err