# tests/loader/test_literals.py
"""
retro_8085.loader.literals モジュールの単体テスト。
"""
import pytest

from retro_8085.common.errors import IndexOutOfRangeError, MalformedLiteralError
from retro_8085.loader.literals import parse16, parse8, parse_index, parse_int

# @intent:test_suite 数値リテラルの解釈規則の検証。


class TestParseInt:
    @pytest.mark.parametrize("text, expected", [
        ("0", 0),
        ("09", 9),
        ("32767", 0x7FFF),
        ("0h", 0),
        ("ffh", 0xFF),
        ("FFH", 0xFF),
        ("3005h", 0x3005),
        (" 10h ", 0x10),
    ])
    def test_valid(self, text, expected):
        assert parse_int(text) == expected

    # @intent:test_case_malformed 解釈できない表記が MalformedLiteralError になることを検証します。
    @pytest.mark.parametrize("text", ["", "h", "12345h", "0x10", "1g", "ab", "32768", "-1"])
    def test_malformed(self, text):
        with pytest.raises(MalformedLiteralError) as excinfo:
            parse_int(text)
        assert excinfo.value.text == text

    def test_malformed_is_value_error(self):
        with pytest.raises(ValueError):
            parse_int("zz")


class TestParseWidths:
    def test_parse8_truncates(self):
        assert parse8("12h") == 0x12
        assert parse8("1234h") == 0x34
        assert parse8("300") == 0x2C

    def test_parse16_little_endian(self):
        assert parse16("3005h") == (0x05, 0x30)
        assert parse16("255") == (0xFF, 0x00)


class TestParseIndex:
    @pytest.mark.parametrize("text", ["0", "5", "7"])
    def test_valid(self, text):
        assert parse_index(text) == int(text)

    @pytest.mark.parametrize("text", ["8", "", "1h", "-1"])
    def test_out_of_range(self, text):
        with pytest.raises(IndexOutOfRangeError):
            parse_index(text)
