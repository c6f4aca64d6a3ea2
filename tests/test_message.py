import json

import pytest

from vibestation.jsonpath import PathError
from vibestation.message import InvalidPathError, Message, Value, is_valid_json_path


def _json(raw):
    return json.loads(raw)


@pytest.fixture
def populated():
    return Message(
        data=b'{"data_field": "data_value"}',
        metadata=b'{"meta_field": "meta_value", "nested": {"key": "value"}}',
    )


GET_CASES = [
    ("meta.$.meta_field", "meta_value", True),
    ("meta.$.nested.key", "value", True),
    ("meta.$.nonexistent", None, False),
    ("$.data_field", "data_value", True),
]


@pytest.mark.parametrize("path,expected,exists", GET_CASES)
def test_get_value(populated, path, expected, exists):
    val = populated.get_value(path)
    assert val.exists is exists
    if exists:
        assert val.value == expected


@pytest.mark.parametrize("path,expected,exists", GET_CASES)
def test_set_then_get_value(populated, path, expected, exists):
    populated.set_value(path, expected)
    val = populated.get_value(path)
    assert val.exists is exists
    if exists:
        assert val.value == expected


@pytest.mark.parametrize(
    "path,value,expected,is_meta",
    [
        ("meta.$.timestamp", "2023-01-01", {"source": "file", "timestamp": "2023-01-01"}, True),
        ("$.value", 42, {"name": "test", "value": 42}, False),
        (
            "meta.$.nested.field",
            "nested_value",
            {"source": "file", "nested": {"field": "nested_value"}},
            True,
        ),
        (
            "$.nested.field",
            "nested_value",
            {"name": "test", "nested": {"field": "nested_value"}},
            False,
        ),
    ],
)
def test_set_value(path, value, expected, is_meta):
    msg = Message(data=b'{"name": "test"}', metadata=b'{"source": "file"}')
    msg.set_value(path, value)
    raw = msg.metadata if is_meta else msg.data
    assert _json(raw) == expected


INVALID_PATHS = ["foo", "bar.baz", "meta foo", "", "$foo", "meta$foo"]


@pytest.mark.parametrize("path", INVALID_PATHS)
def test_invalid_path_get(path):
    msg = Message(data=b'{"foo": "bar"}', metadata=b'{"meta": "data"}')
    assert msg.get_value(path).exists is False


@pytest.mark.parametrize("path", INVALID_PATHS)
def test_invalid_path_set(path):
    msg = Message(data=b'{"foo": "bar"}', metadata=b'{"meta": "data"}')
    with pytest.raises(InvalidPathError):
        msg.set_value(path, "value")
    assert _json(msg.data) == {"foo": "bar"}


@pytest.mark.parametrize("path", INVALID_PATHS)
def test_invalid_path_delete(path):
    msg = Message(data=b'{"foo": "bar"}', metadata=b'{"meta": "data"}')
    with pytest.raises(InvalidPathError):
        msg.delete_value(path)


def test_invalid_path_error_is_path_error():
    with pytest.raises(PathError):
        Message().set_value("nope", 1)


def test_root_and_meta_root():
    msg = Message(data=b'{"foo": 123, "bar": "baz"}', metadata=b'{"meta": true, "count": 5}')

    val = msg.get_value("$")
    assert val.exists
    assert val.value == {"foo": 123, "bar": "baz"}

    meta_val = msg.get_value("meta.$")
    assert meta_val.exists
    assert meta_val.value == {"meta": True, "count": 5}

    msg.set_value("$", {"x": 1, "y": 2})
    assert msg.get_value("$").value == {"x": 1, "y": 2}

    msg.set_value("meta.$", {"meta": False, "z": 99})
    assert msg.get_value("meta.$").value == {"meta": False, "z": 99}

    msg.delete_value("$")
    assert msg.get_value("$").value == {}
    msg.delete_value("meta.$")
    assert msg.get_value("meta.$").value == {}


def test_nested_set_and_get():
    msg = Message()
    msg.set_value("$.a.b.c", "nested_value")
    val = msg.get_value("$.a.b.c")
    assert val.exists
    assert str(val) == "nested_value"


def test_dotted_numeric_key_set_and_get():
    msg = Message()
    msg.set_value("$.a.b.c", "nested_value")
    msg.set_value("$.arr.0", "first")
    val = msg.get_value("$.arr.0")
    assert val.exists
    assert str(val) == "first"


def test_metadata_set_and_get():
    msg = Message()
    msg.set_value("meta.$.test", "metadata_value")
    val = msg.get_value("meta.$.test")
    assert val.exists
    assert str(val) == "metadata_value"
    assert msg.data == b""


def test_root_of_non_json_data_does_not_exist():
    msg = Message(data=b"plain text")
    assert msg.get_value("$").exists is False
    assert msg.get_value("$.x").exists is False


def test_delete_nested_value():
    msg = Message(data=b'{"a": {"b": 1, "c": 2}}')
    msg.delete_value("$.a.b")
    assert _json(msg.data) == {"a": {"c": 2}}


def test_delete_meta_value():
    msg = Message(metadata=b'{"k": 1, "j": 2}')
    msg.delete_value("meta.$.k")
    assert _json(msg.metadata) == {"j": 2}


def test_set_value_on_scalar_data_raises_path_error():
    msg = Message(data=b'"just a string"')
    with pytest.raises(PathError):
        msg.set_value("$.x", 1)


def test_control_message():
    msg = Message(data=b"abc", metadata=b"def").as_control()
    assert msg.is_control
    assert msg.data == b""
    assert msg.metadata == b""
    msg.data = b"new"
    msg.metadata = b"new"
    assert msg.data == b""
    assert msg.metadata == b""


def test_data_setter_and_str():
    msg = Message()
    assert msg.is_control is False
    msg.data = "héllo"
    assert msg.data == "héllo".encode("utf-8")
    assert str(msg) == "héllo"


@pytest.mark.parametrize(
    "path,valid",
    [
        ("$", True),
        ("meta.$", True),
        ("$.a", True),
        ("  $.a  ", True),
        ("meta.$.a", True),
        ("$a", False),
        ("meta $", False),
        ("", False),
    ],
)
def test_is_valid_json_path(path, valid):
    assert is_valid_json_path(path) is valid


def test_value_str_conversions():
    assert str(Value(None, True)) == ""
    assert str(Value("text", True)) == "text"
    assert str(Value(b"raw", True)) == "raw"
    assert str(Value({"b": 1, "a": [1, 2]}, True)) == '{"a":[1,2],"b":1}'
    assert str(Value(True, True)) == "true"


def test_value_as_bytes():
    assert Value(None, True).as_bytes() is None
    assert Value("abc", True).as_bytes() == b"abc"
    assert Value(b"xyz", True).as_bytes() == b"xyz"
    assert Value([1, "a"], True).as_bytes() == b'[1,"a"]'


@pytest.mark.parametrize(
    "raw,expected",
    [(None, 0), (7, 7), (3.9, 3), ("-12", -12), ("1.5", 0), ("x", 0), (True, 0)],
)
def test_value_as_int(raw, expected):
    assert Value(raw, True).as_int() == expected


@pytest.mark.parametrize(
    "raw,expected",
    [(None, 0.0), (2, 2.0), (2.5, 2.5), ("3.25", 3.25), ("abc", 0.0), (False, 0.0)],
)
def test_value_as_float(raw, expected):
    assert Value(raw, True).as_float() == expected


@pytest.mark.parametrize(
    "raw,expected",
    [
        (None, False),
        (True, True),
        (False, False),
        ("true", True),
        ("1", True),
        ("yes", False),
        (3, True),
        (0, False),
        (0.0, False),
        ([1], False),
    ],
)
def test_value_as_bool(raw, expected):
    assert Value(raw, True).as_bool() is expected


def test_value_as_list():
    items = Value([1, "a"], True).as_list()
    assert [item.value for item in items] == [1, "a"]
    assert all(item.exists for item in items)
    assert Value("nope", True).as_list() is None


def test_value_as_dict():
    members = Value({"a": 1, "b": None}, True).as_dict()
    assert set(members) == {"a", "b"}
    assert members["a"].value == 1
    assert members["b"].exists is False
    assert Value(5, True).as_dict() is None


def test_value_exists_requires_non_null():
    assert Value(None, True).exists is False
    assert Value("x", False).exists is False
    assert Value(0, True).exists is True


def test_get_value_from_array_index():
    msg = Message(data=b'{"a": {"d": [1, 2, 3]}}')
    assert msg.get_value("$.a.d[1]").value == 2
    assert msg.get_value("$.a.d[5]").exists is False