# retro_8085/arch/i8085/state.py
"""
Intel 8085 CPU状態

8085 のレジスタ、レジスタペア、フラグの定義と、それらを保持する状態クラスを提供します。
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Optional, Tuple

from retro_8085.core.state import CpuState

# 3bitレジスタフィールドで M (H:L が指すメモリ) を表す値
MEMORY_OFFSET = 6

# PSW下位バイトのビット1は常に1
PSW_FIXED_BITS = 0x02


# @intent:responsibility 8bit レジスタ。値は命令エンコーディング上の3bitフィールドの値です。
class Register(Enum):
    B = 0
    C = 1
    D = 2
    E = 3
    H = 4
    L = 5
    A = 7

    @property
    def offset(self) -> int:
        return self.value


# @intent:responsibility 16bit レジスタペア。SP と PSW を含みます。
class RegisterPair(Enum):
    B = "B"
    D = "D"
    H = "H"
    SP = "SP"
    PSW = "PSW"

    # @intent:responsibility 命令エンコーディング上のペアフィールド（ビット4-5）の値を返します。
    @property
    def offset(self) -> int:
        return _PAIR_OFFSETS[self]

    # @intent:responsibility ペアを構成する (上位, 下位) レジスタを返します。SP と PSW は None。
    @property
    def registers(self) -> Optional[Tuple[Register, Register]]:
        return _PAIR_REGISTERS.get(self)


_PAIR_OFFSETS = {
    RegisterPair.B: 0x00,
    RegisterPair.D: 0x10,
    RegisterPair.H: 0x20,
    RegisterPair.SP: 0x30,
    RegisterPair.PSW: 0x30,
}

_PAIR_REGISTERS = {
    RegisterPair.B: (Register.B, Register.C),
    RegisterPair.D: (Register.D, Register.E),
    RegisterPair.H: (Register.H, Register.L),
}


# @intent:responsibility ステータスフラグ。値は PSW 下位バイト上のビットマスクです。
class Flag(Enum):
    S = 0x80  # Sign
    Z = 0x40  # Zero
    AC = 0x10  # Auxiliary Carry
    P = 0x04  # Parity (even)
    C = 0x01  # Carry


# @intent:responsibility 8085 CPU のレジスタ状態を保持します。
@dataclass
class I8085CpuState(CpuState):
    """
    8085 のレジスタ状態。
    値の変更は通知を伴うため、I8085Cpu のアクセサを通して行います。
    """
    registers: Dict[Register, int] = field(default_factory=lambda: {register: 0 for register in Register})
    flags: Dict[Flag, bool] = field(default_factory=lambda: {flag: False for flag in Flag})
    interrupt_mask: int = 0x00

    @property
    def a(self) -> int:
        return self.registers[Register.A]

    @property
    def bc(self) -> int:
        return (self.registers[Register.B] << 8) | self.registers[Register.C]

    @property
    def de(self) -> int:
        return (self.registers[Register.D] << 8) | self.registers[Register.E]

    @property
    def hl(self) -> int:
        return (self.registers[Register.H] << 8) | self.registers[Register.L]

    def copy(self) -> "I8085CpuState":
        return replace(self, registers=dict(self.registers), flags=dict(self.flags))
