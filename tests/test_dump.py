import io
import os

import pytest

from jsontree.dump import (
    DumpError,
    DumpFlag,
    dump_callback,
    dump_file,
    dumpb,
    dumpf,
    dumpfd,
    dumps,
    indent,
    real_precision,
)
from jsontree.error import ErrorCode
from jsontree.values import (
    JsonArray,
    JsonInteger,
    JsonObject,
    JsonReal,
    JsonString,
    false,
    null,
    true,
)


def test_encode_null():
    with pytest.raises(DumpError):
        dumps(None, DumpFlag.ENCODE_ANY)
    with pytest.raises(DumpError):
        dumpb(None, DumpFlag.ENCODE_ANY)
    out = io.StringIO()
    with pytest.raises(DumpError):
        dumpf(None, out, DumpFlag.ENCODE_ANY)
    assert out.getvalue() == ""
    chunks = []
    with pytest.raises(DumpError):
        dump_callback(None, chunks.append, DumpFlag.ENCODE_ANY)
    assert chunks == []


def test_encode_null_fd():
    read_end, write_end = os.pipe()
    try:
        with pytest.raises(DumpError):
            dumpfd(None, write_end, DumpFlag.ENCODE_ANY)
    finally:
        os.close(write_end)
        os.close(read_end)


def test_encode_twice():
    obj = JsonObject()
    assert dumps(obj) == "{}"
    obj.set("foo", JsonInteger(5))
    assert dumps(obj) == '{"foo": 5}'

    arr = JsonArray()
    assert dumps(arr) == "[]"
    arr.append(JsonInteger(5))
    assert dumps(arr) == "[5]"


def test_circular_object_reference():
    root = JsonObject()
    a = JsonObject()
    b = JsonObject()
    root.set("a", a)
    a.set("b", b)
    b.set("c", a)
    with pytest.raises(DumpError):
        dumps(root)
    b.delete("c")
    assert dumps(root) == '{"a": {"b": {}}}'


def test_circular_array_reference():
    root = JsonArray()
    inner = JsonArray()
    innermost = JsonArray()
    root.append(inner)
    inner.append(innermost)
    innermost.append(inner)
    with pytest.raises(DumpError):
        dumps(root)
    innermost.remove(0)
    assert dumps(root) == "[[[]]]"


def test_shared_value_is_not_circular():
    shared = JsonArray([JsonInteger(1)])
    root = JsonArray([shared, shared])
    assert dumps(root) == "[[1], [1]]"


def test_encode_string_requires_encode_any():
    value = JsonString("foo")
    with pytest.raises(DumpError) as info:
        dumps(value)
    assert info.value.code == ErrorCode.WRONG_TYPE
    out = io.StringIO()
    with pytest.raises(DumpError):
        dumpf(value, out)
    assert out.getvalue() == ""
    with pytest.raises(DumpError):
        dumpfd(value, -1)
    assert dumps(value, DumpFlag.ENCODE_ANY) == '"foo"'


def test_encode_integer_requires_encode_any():
    value = JsonInteger(42)
    with pytest.raises(DumpError):
        dumps(value)
    with pytest.raises(DumpError):
        dumpf(value, io.StringIO())
    with pytest.raises(DumpError):
        dumpfd(value, -1)
    assert dumps(value, DumpFlag.ENCODE_ANY) == "42"


def test_escape_slashes():
    obj = JsonObject()
    obj.set("url", JsonString("https://example.com/some/path"))
    assert dumps(obj) == '{"url": "https://example.com/some/path"}'
    assert (
        dumps(obj, DumpFlag.ESCAPE_SLASH)
        == '{"url": "https:\\/\\/example.com\\/some\\/path"}'
    )


def test_encode_nul_byte():
    value = JsonString("nul byte \0 in string")
    assert dumps(value, DumpFlag.ENCODE_ANY) == '"nul byte \\u0000 in string"'


def test_dump_file(tmp_path):
    with pytest.raises(DumpError):
        dump_file(None, tmp_path / "none.json")
    path = tmp_path / "json_dump_file.json"
    dump_file(JsonObject(), path)
    assert path.read_text(encoding="utf-8") == "{}"


def test_dump_file_unwritable(tmp_path):
    with pytest.raises(DumpError) as info:
        dump_file(JsonObject(), tmp_path / "missing" / "out.json")
    assert info.value.code == ErrorCode.CANNOT_OPEN_FILE


def test_dumpb():
    assert dumpb(JsonObject()) == b"{}"
    obj = JsonObject({"foo": JsonString("bar")})
    result = dumpb(obj, DumpFlag.COMPACT)
    assert len(result) == 13
    assert result == b'{"foo":"bar"}'


def test_dumpfd_round_trip():
    obj = JsonObject({"foo": JsonString("bar")})
    read_end, write_end = os.pipe()
    try:
        dumpfd(obj, write_end)
        os.close(write_end)
        write_end = -1
        with os.fdopen(read_end, "rb") as reader:
            read_end = -1
            data = reader.read()
    finally:
        if write_end != -1:
            os.close(write_end)
        if read_end != -1:
            os.close(read_end)
    assert data == dumpb(obj)
    assert data == b'{"foo": "bar"}'


@pytest.mark.parametrize(
    "value, plain",
    [
        (
            JsonObject({"foo": JsonObject(), "bar": JsonArray()}),
            '{"bar":[],"foo":{}}',
        ),
        (JsonArray([JsonArray(), JsonObject()]), "[[],{}]"),
        (JsonObject(), "{}"),
        (JsonArray(), "[]"),
    ],
)
def test_embed(value, plain):
    flags = DumpFlag.COMPACT | DumpFlag.SORT_KEYS | DumpFlag.EMBED
    result = dumpb(value, flags)
    assert len(result) == len(plain) - 2
    assert result.decode("utf-8") == plain[1:-1]


def test_dump_order_with_binary_keys():
    obj = JsonObject()
    obj.set(b"k\0-2", JsonString("second"))
    obj.set(b"k\0-1", JsonString("first"))
    assert dumps(obj) == '{"k\\u0000-2": "second", "k\\u0000-1": "first"}'
    assert (
        dumps(obj, DumpFlag.SORT_KEYS)
        == '{"k\\u0000-1": "first", "k\\u0000-2": "second"}'
    )


def test_invalid_utf8_key_raises():
    obj = JsonObject()
    obj.set(b"\xff\xfe", true())
    with pytest.raises(DumpError) as info:
        dumps(obj)
    assert info.value.code == ErrorCode.INVALID_UTF8


def test_preserves_insertion_order_and_sorts_on_request():
    obj = JsonObject()
    obj.set("b", JsonInteger(1))
    obj.set("a", JsonInteger(2))
    assert dumps(obj) == '{"b": 1, "a": 2}'
    assert dumps(obj, DumpFlag.SORT_KEYS) == '{"a": 2, "b": 1}'


def test_compact_and_default_separators():
    obj = JsonObject({"a": JsonArray([JsonInteger(1), JsonInteger(2)])})
    assert dumps(obj) == '{"a": [1, 2]}'
    assert dumps(obj, DumpFlag.COMPACT) == '{"a":[1,2]}'


def test_indentation():
    obj = JsonObject({"a": JsonArray([JsonInteger(1), JsonInteger(2)])})
    expected = '{\n  "a": [\n    1,\n    2\n  ]\n}'
    assert dumps(obj, indent(2)) == expected


def test_indent_and_precision_flag_bits():
    assert indent(33) == 1
    assert indent(4) == 4
    assert real_precision(3) == 3 << 11


def test_literals():
    flags = DumpFlag.ENCODE_ANY
    assert dumps(true(), flags) == "true"
    assert dumps(false(), flags) == "false"
    assert dumps(null(), flags) == "null"
    assert dumps(JsonInteger(-17), flags) == "-17"


@pytest.mark.parametrize(
    "number, text",
    [
        (1.5, "1.5"),
        (1.0, "1.0"),
        (100.1, "100.1"),
        (-0.0, "-0.0"),
        (1e16, "1e16"),
        (1e-5, "1e-5"),
    ],
)
def test_real_formatting(number, text):
    assert dumps(JsonReal(number), DumpFlag.ENCODE_ANY) == text


def test_real_precision():
    flags = DumpFlag.ENCODE_ANY | real_precision(3)
    assert dumps(JsonReal(3.14159), flags) == "3.14"
    assert dumps(JsonReal(100.0), flags) == "100.0"


def test_control_characters_escaped():
    value = JsonString('a"b\\c\n\t\r\b\f\x01')
    assert (
        dumps(value, DumpFlag.ENCODE_ANY)
        == '"a\\"b\\\\c\\n\\t\\r\\b\\f\\u0001"'
    )


def test_ensure_ascii():
    value = JsonString("\u00e9\U0001F600")
    assert dumps(value, DumpFlag.ENCODE_ANY) == '"\u00e9\U0001F600"'
    assert (
        dumps(value, DumpFlag.ENCODE_ANY | DumpFlag.ENSURE_ASCII)
        == '"\\u00E9\\uD83D\\uDE00"'
    )


def test_dump_callback_chunks_join_to_dumps():
    obj = JsonObject({"x": JsonArray([JsonInteger(1), JsonString("y")])})
    chunks = []
    dump_callback(obj, chunks.append, DumpFlag.SORT_KEYS)
    assert "".join(chunks) == dumps(obj, DumpFlag.SORT_KEYS)
    assert len(chunks) > 1


def test_dump_callback_exception_propagates():
    def failing(chunk):
        raise RuntimeError("stop")

    with pytest.raises(RuntimeError):
        dump_callback(JsonArray(), failing)


def test_dumpf_writes_text_stream():
    out = io.StringIO()
    dumpf(JsonArray([JsonInteger(1), true()]), out, DumpFlag.COMPACT)
    assert out.getvalue() == "[1,true]"


def test_unknown_value_type_raises():
    with pytest.raises(DumpError) as info:
        dumps(42, DumpFlag.ENCODE_ANY)
    assert info.value.code == ErrorCode.WRONG_TYPE