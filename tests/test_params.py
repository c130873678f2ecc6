import enum
from urllib.parse import parse_qsl, quote_plus

import pytest

from graph_http import EncodingError, UploadableIO, encode_params
from graph_http.params import prepare_body
from graph_http.uploads import UploadIO


class Color(enum.Enum):
    RED = "red"


class Tone(str, enum.Enum):
    WARM = "warm"


def test_empty_params_encode_to_empty_string():
    assert encode_params(None) == ""
    assert encode_params({}) == ""


def test_non_string_values_are_json_encoded():
    result = encode_params({"limit": 10, "flag": True, "ids": [1, 2], "meta": {"a": None}})

    assert dict(parse_qsl(result)) == {
        "flag": "true",
        "ids": "[1,2]",
        "limit": "10",
        "meta": '{"a":null}',
    }


def test_strings_are_sent_verbatim():
    result = encode_params({"q": "hi"})

    assert result == "q=hi"


def test_values_are_escaped():
    args = {str(i): f"Value {i}($" for i in range(1, 5)}

    result = encode_params(args)

    for pair in result.split("&"):
        key, val = pair.split("=")
        assert val == quote_plus(args[key])


def test_keys_are_sorted_and_stringified():
    result = encode_params({"b": "2", "a": "1", 3: "x"})

    assert [pair.split("=")[0] for pair in result.split("&")] == ["3", "a", "b"]


def test_enum_values_encode_like_atoms():
    assert encode_params({"color": Color.RED}) == "color=%22red%22"
    assert encode_params({"tone": Tone.WARM}) == "tone=%22warm%22"
    assert encode_params({"colors": [Color.RED]}) == "colors=%5B%22red%22%5D"


def test_unserializable_value_raises_encoding_error_with_key():
    with pytest.raises(EncodingError) as excinfo:
        encode_params({"bad": object()})

    assert excinfo.value.key == "bad"


def test_encode_rejects_uploads(tmp_path):
    photo = tmp_path / "photo.jpg"
    photo.write_bytes(b"\xff\xd8")

    with pytest.raises(EncodingError):
        encode_params({"source": UploadableIO(str(photo))})


def test_prepare_body_materializes_uploads(tmp_path):
    photo = tmp_path / "photo.jpg"
    photo.write_bytes(b"\xff\xd8")
    upload = UploadableIO(str(photo))

    body = prepare_body({"source": upload, "caption": "x", "count": 2})

    assert list(body) == ["caption", "count", "source"]
    assert body["caption"] == "x"
    assert body["count"] == "2"
    assert isinstance(body["source"], UploadIO)
    assert body["source"].content_type == "image/jpeg"
    upload.close()


def test_prepare_body_uses_materialize_protocol():
    sentinel = UploadIO("a.txt", object(), "text/plain")

    class Source:
        def materialize(self):
            return sentinel

    assert prepare_body({"source": Source()}) == {"source": sentinel}


def test_nan_is_rejected_as_invalid_json():
    with pytest.raises(EncodingError) as excinfo:
        encode_params({"ratio": float("nan")})

    assert excinfo.value.key == "ratio"
