"""
Value codec tests

Encoding rules, decoding rules, lenient/strict anomaly handling and
round-trips for every scalar and composite type.
"""
from datetime import datetime

import pytest
from lxml import etree

from seam_xmlrpc.codec.values import (
    LENIENT_SENTINEL,
    decode_value,
    encode_value,
)
from seam_xmlrpc.errors import ProtocolError, UnsupportedTypeError


def to_xml(value, **kwargs) -> bytes:
    return etree.tostring(encode_value(value, **kwargs))


def from_xml(xml: str, **kwargs):
    return decode_value(etree.fromstring(xml), **kwargs)


def roundtrip(value):
    """Encode, serialize, reparse and decode in strict mode"""
    return decode_value(etree.fromstring(etree.tostring(encode_value(value))), strict=True)


class TestEncoding:
    """Test native value -> <value> element"""

    def test_boolean(self):
        assert to_xml(True) == b"<value><boolean>1</boolean></value>"
        assert to_xml(False) == b"<value><boolean>0</boolean></value>"

    def test_integers(self):
        assert to_xml(42) == b"<value><int>42</int></value>"
        assert to_xml(-7) == b"<value><int>-7</int></value>"
        assert to_xml(0) == b"<value><int>0</int></value>"

    def test_double(self):
        assert to_xml(1.5) == b"<value><double>1.5</double></value>"
        assert to_xml(-0.25) == b"<value><double>-0.25</double></value>"

    def test_string_is_xml_escaped(self):
        assert to_xml("a<b&c") == b"<value><string>a&lt;b&amp;c</string></value>"

    def test_datetime_uses_fixed_wire_format(self):
        assert to_xml(datetime(2024, 1, 15, 13, 45, 0)) == \
            b"<value><dateTime.iso8601>20240115T13:45:00</dateTime.iso8601></value>"

    def test_datetime_drops_fractional_seconds(self):
        value = encode_value(datetime(2024, 1, 15, 13, 45, 0, 999999))
        assert value.findtext("dateTime.iso8601") == "20240115T13:45:00"

    def test_base64_without_line_wrapping(self):
        assert to_xml(b"hello") == b"<value><base64>aGVsbG8=</base64></value>"
        encoded = encode_value(b"x" * 200).findtext("base64")
        assert "\n" not in encoded

    def test_bytearray_encodes_as_base64(self):
        assert to_xml(bytearray(b"hi")) == b"<value><base64>aGk=</base64></value>"

    def test_array_preserves_order(self):
        assert to_xml([1, "a", True]) == (
            b"<value><array><data>"
            b"<value><int>1</int></value>"
            b"<value><string>a</string></value>"
            b"<value><boolean>1</boolean></value>"
            b"</data></array></value>"
        )

    def test_tuple_encodes_as_array(self):
        assert to_xml((1, 2)) == to_xml([1, 2])

    def test_empty_array(self):
        assert to_xml([]) == b"<value><array><data/></array></value>"

    def test_struct_members(self):
        """Members are compared as a set; their order is not part of the contract"""
        element = encode_value({"a": 1, "b": "x", "c": [True]})
        struct = element.find("struct")
        assert struct is not None

        members = {
            member.findtext("name"): etree.tostring(member.find("value"))
            for member in struct.findall("member")
        }
        assert members == {
            "a": b"<value><int>1</int></value>",
            "b": b"<value><string>x</string></value>",
            "c": b"<value><array><data><value><boolean>1</boolean></value></data></array></value>",
        }

    def test_every_node_has_one_typed_child(self):
        element = encode_value({"list": [1, {"inner": 2.0}], "s": "t"})
        for value in element.iter("value"):
            assert len(value) == 1


class TestUnsupportedTypes:
    """Test values with no encoding rule"""

    @pytest.mark.parametrize("value", [None, object(), {1: "a"}, {"ok": 1, 2: "bad"}, 1j])
    def test_lenient_leaves_value_empty(self, value):
        messages = []
        element = encode_value(value, diagnostics=messages.append)
        assert element.tag == "value"
        assert len(element) == 0
        assert len(messages) == 1
        assert "not supported" in messages[0]

    @pytest.mark.parametrize("value", [None, object(), {1: "a"}])
    def test_strict_raises(self, value):
        with pytest.raises(UnsupportedTypeError):
            encode_value(value, strict=True)

    def test_unsupported_type_error_is_type_error(self):
        with pytest.raises(TypeError, match="NoneType"):
            encode_value(None, strict=True)

    def test_nested_unsupported_only_degrades_its_node(self):
        messages = []
        element = encode_value([1, None, 3], diagnostics=messages.append)
        items = element.findall("array/data/value")
        assert [len(item) for item in items] == [1, 0, 1]
        assert len(messages) == 1

    def test_string_with_control_characters(self):
        messages = []
        element = encode_value("bad\x00value", diagnostics=messages.append)
        assert len(element) == 0
        assert len(messages) == 1

    @pytest.mark.parametrize("key", ["bad\x00key", "k\x01", "esc\x1bname"])
    def test_struct_member_name_with_control_characters_is_dropped(self, key):
        messages = []
        element = encode_value({key: 1, "ok": 2}, diagnostics=messages.append)
        members = element.findall("struct/member")
        assert [m.findtext("name") for m in members] == ["ok"]
        assert members[0].findtext("value/int") == "2"
        assert len(messages) == 1
        assert "Struct member name" in messages[0]

    def test_struct_member_name_with_control_characters_strict(self):
        with pytest.raises(UnsupportedTypeError, match="Struct member name"):
            encode_value({"bad\x00key": 1}, strict=True)

    def test_nested_struct_member_name_only_drops_that_member(self):
        messages = []
        element = encode_value([{"a": 1, "b\x02": 2}], diagnostics=messages.append)
        names = [e.text for e in element.iter("name")]
        assert names == ["a"]
        assert len(messages) == 1


class TestDecoding:
    """Test <value> element -> native value"""

    def test_int_and_i4_are_identical(self):
        assert from_xml("<value><int>42</int></value>") == 42
        assert from_xml("<value><i4>42</i4></value>") == 42

    def test_negative_and_signed_integers(self):
        assert from_xml("<value><int>-17</int></value>") == -17
        assert from_xml("<value><i4>+5</i4></value>") == 5

    @pytest.mark.parametrize("text, expected", [
        ("1", True), ("0", False), ("true", True), ("false", False), (" 1 ", True),
    ])
    def test_boolean_literals(self, text, expected):
        assert from_xml(f"<value><boolean>{text}</boolean></value>") is expected

    def test_double(self):
        assert from_xml("<value><double>-2.5</double></value>") == -2.5

    def test_string(self):
        assert from_xml("<value><string>hi &amp; bye</string></value>") == "hi & bye"

    def test_empty_string(self):
        assert from_xml("<value><string/></value>") == ""
        assert from_xml("<value><string></string></value>") == ""

    def test_datetime(self):
        assert from_xml("<value><dateTime.iso8601>20240115T13:45:00</dateTime.iso8601></value>") == \
            datetime(2024, 1, 15, 13, 45, 0)

    def test_base64_with_line_breaks(self):
        assert from_xml("<value><base64>\naGVs\nbG8=\n</base64></value>") == b"hello"

    def test_array_order(self):
        xml = (
            "<value><array><data>"
            "<value><int>3</int></value>"
            "<value><string>two</string></value>"
            "<value><array><data><value><int>1</int></value></data></array></value>"
            "</data></array></value>"
        )
        assert from_xml(xml) == [3, "two", [1]]

    def test_array_without_data_is_empty(self):
        assert from_xml("<value><array/></value>") == []

    def test_struct(self):
        xml = (
            "<value><struct>"
            "<member><name>faultCode</name><value><int>4</int></value></member>"
            "<member><name>faultString</name><value><string>Too many parameters.</string></value></member>"
            "</struct></value>"
        )
        assert from_xml(xml) == {"faultCode": 4, "faultString": "Too many parameters."}

    def test_struct_duplicate_names_last_wins(self):
        xml = (
            "<value><struct>"
            "<member><name>k</name><value><int>1</int></value></member>"
            "<member><name>k</name><value><int>2</int></value></member>"
            "</struct></value>"
        )
        assert from_xml(xml) == {"k": 2}

    def test_whitespace_and_comments_are_ignored(self):
        xml = "<value>\n  <!-- note -->\n  <int>7</int>\n</value>"
        assert from_xml(xml) == 7


class TestDecodingAnomalies:
    """Test lenient placeholders and strict ProtocolError"""

    @pytest.mark.parametrize("xml", [
        "<value><nil/></value>",
        "<value></value>",
        "<value><Int>1</Int></value>",
        "<value><boolean>yes</boolean></value>",
        "<value><int>abc</int></value>",
        "<value><int>4_2</int></value>",
        "<value><double>fast</double></value>",
        "<value><dateTime.iso8601>2024-01-15T13:45:00Z</dateTime.iso8601></value>",
        "<value><struct><member><value><int>1</int></value></member></struct></value>",
        "<value><struct><member><name>k</name></member></struct></value>",
    ])
    def test_strict_raises_protocol_error(self, xml):
        with pytest.raises(ProtocolError):
            from_xml(xml, strict=True)

    def test_unknown_tag_lenient_returns_sentinel(self):
        messages = []
        assert from_xml("<value><nil/></value>", diagnostics=messages.append) == LENIENT_SENTINEL
        assert len(messages) == 1
        assert "nil" in messages[0]

    def test_missing_member_name_lenient_returns_sentinel(self):
        messages = []
        xml = "<value><struct><member><value><int>1</int></value></member></struct></value>"
        assert from_xml(xml, diagnostics=messages.append) == LENIENT_SENTINEL
        assert "name" in messages[0]

    def test_lenient_sentinel_is_per_node(self):
        xml = (
            "<value><array><data>"
            "<value><int>1</int></value>"
            "<value><unknown>x</unknown></value>"
            "<value><int>3</int></value>"
            "</data></array></value>"
        )
        assert from_xml(xml, diagnostics=lambda message: None) == [1, LENIENT_SENTINEL, 3]

    def test_malformed_base64_lenient_is_empty(self):
        messages = []
        assert from_xml("<value><base64>!!!not base64</base64></value>",
                        diagnostics=messages.append) == b""
        assert len(messages) == 1

    def test_malformed_base64_strict_raises(self):
        with pytest.raises(ProtocolError, match="base64"):
            from_xml("<value><base64>abc</base64></value>", strict=True)


class TestRoundTrip:
    """decode(encode(v)) == v"""

    @pytest.mark.parametrize("value", [
        True,
        False,
        0,
        -42,
        2 ** 31 - 1,
        -(2 ** 31),
        0.0,
        -1.25,
        1e20,
        "",
        "hello world",
        "héllo ünïcödé ✓",
        "  leading and trailing  ",
        datetime(1970, 1, 1, 0, 0, 0),
        datetime(2024, 1, 15, 13, 45, 0),
        b"",
        b"\x00\xff binary",
        bytes(range(256)),
    ])
    def test_scalars(self, value):
        result = roundtrip(value)
        assert result == value
        assert type(result) is type(value)

    def test_mixed_list(self):
        value = [1, "two", 3.0, False, datetime(2000, 2, 29, 12, 0, 0), b"\x01"]
        assert roundtrip(value) == value

    def test_nested_struct(self):
        value = {
            "name": "job",
            "tags": ["a", "b"],
            "limits": {"cpu": 2, "ratio": 0.5, "nested": {"deep": [1, [2, 3]]}},
            "payload": b"data",
            "empty": {},
            "none": [],
        }
        result = roundtrip(value)
        assert set(result) == set(value)
        for key in value:
            assert result[key] == value[key]
