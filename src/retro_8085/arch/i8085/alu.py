# retro_8085/arch/i8085/alu.py
"""
8085 ALU ヘルパー

フラグ計算を共通化する関数群です。フラグの更新は CPU のアクセサを通して行い、
変化があった場合のみ通知が発行されます。
"""
from typing import TYPE_CHECKING, Dict

from retro_8085.arch.i8085.state import PSW_FIXED_BITS, Flag

if TYPE_CHECKING:
    from retro_8085.arch.i8085.cpu import I8085Cpu


# @intent:responsibility 値の中の1のビット数が偶数かどうかを判定します。
def calculate_parity(value: int) -> bool:
    """
    8bit 値のパリティを計算します（偶数パリティなら True）。
    """
    value &= 0xFF
    value ^= value >> 4
    value ^= value >> 2
    value ^= value >> 1
    return (value & 1) == 0


# @intent:responsibility 加算で下位ニブルからの桁上がりが発生するかを判定します。
def aux_carry_add(val1: int, val2: int, carry_in: int = 0) -> bool:
    return ((val1 & 0x0F) + (val2 & 0x0F) + carry_in) > 0x0F


# @intent:responsibility 減算で下位ニブルへの桁借りが発生するかを判定します。
def aux_carry_sub(val1: int, val2: int, borrow_in: int = 0) -> bool:
    return ((val1 & 0x0F) - (val2 & 0x0F) - borrow_in) < 0


# @intent:responsibility 結果値から S, Z, P フラグを更新します。
def update_flags_szp(cpu: "I8085Cpu", result: int) -> None:
    result &= 0xFF
    cpu.set_flag(Flag.P, calculate_parity(result))
    cpu.set_flag(Flag.Z, result == 0)
    cpu.set_flag(Flag.S, (result & 0x80) != 0)


# @intent:responsibility フラグを PSW 下位バイトの形式 `S Z 0 AC 0 P 1 C` に詰めます。
def pack_flags(flags: Dict[Flag, bool]) -> int:
    value = PSW_FIXED_BITS
    for flag, is_set in flags.items():
        if is_set:
            value |= flag.value
    return value


def unpack_flags(value: int) -> Dict[Flag, bool]:
    return {flag: (value & flag.value) != 0 for flag in Flag}
