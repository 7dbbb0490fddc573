# retro_8085/loader/literals.py
"""
数値リテラルの解析

アセンブリソース中の数値表記を解釈します。
  - 末尾に h が付く場合は16進数（1〜4桁）。例: 3005h, ffh
  - それ以外は10進数（0〜32767）。
"""
import string
from typing import Tuple

from retro_8085.common.errors import IndexOutOfRangeError, MalformedLiteralError

HEX_SUFFIX = "h"
MAX_HEX_DIGITS = 4
MAX_DECIMAL = 0x7FFF
MAX_INDEX = 7

_DECIMAL_DIGITS = frozenset(string.digits)
_HEX_DIGITS = frozenset(string.hexdigits)


# @intent:responsibility リテラル文字列を整数に変換します。
# @intent:post-condition 解釈できない場合は MalformedLiteralError を送出します。
def parse_int(text: str) -> int:
    literal = text.strip().lower()
    if literal.endswith(HEX_SUFFIX):
        digits = literal[:-1]
        if not digits or len(digits) > MAX_HEX_DIGITS or not set(digits) <= _HEX_DIGITS:
            raise MalformedLiteralError(text)
        return int(digits, 16)

    if not literal or not set(literal) <= _DECIMAL_DIGITS:
        raise MalformedLiteralError(text)
    value = int(literal)
    if value > MAX_DECIMAL:
        raise MalformedLiteralError(text)
    return value


def parse8(text: str) -> int:
    """8bit 値として解釈します。範囲を超える値は下位8bitに切り詰められます。"""
    return parse_int(text) & 0xFF


def parse16(text: str) -> Tuple[int, int]:
    """16bit 値として解釈し、(下位バイト, 上位バイト) を返します。"""
    value = parse_int(text)
    return value & 0xFF, (value >> 8) & 0xFF


# @intent:responsibility RST 番号 (0〜7) を解釈します。
def parse_index(text: str) -> int:
    literal = text.strip()
    if not literal or not set(literal) <= _DECIMAL_DIGITS or int(literal) > MAX_INDEX:
        raise IndexOutOfRangeError(text)
    return int(literal)
