# retro_8085/arch/i8085/instructions/alu.py
"""
算術・論理・ローテート命令の実行ロジック。

フラグの規則:
  - ADD/ADI/SUB/SUI は S, Z, AC, P, C を更新します。
  - ADC/ACI/SBB/SBI はキャリーを演算に含めた後、C を 0 にします。
  - CMP/CPI は A を変更せず、A と等しい場合は C を保持します。
  - INR/DCR は C を変更しません。DAD は C のみ、INX/DCX はフラグを変更しません。
"""
from typing import TYPE_CHECKING, Optional

from retro_8085.arch.i8085.alu import aux_carry_add, aux_carry_sub, update_flags_szp
from retro_8085.arch.i8085.instructions.base import get_operand_value, set_operand_value
from retro_8085.arch.i8085.state import Flag, Register, RegisterPair

if TYPE_CHECKING:
    from retro_8085.arch.i8085.cpu import I8085Cpu


# @intent:responsibility A に value (+carry_in) を加算し、全フラグを更新します。
def _add(cpu: "I8085Cpu", value: int, carry_in: int = 0) -> None:
    a = cpu.get_register(Register.A)
    result = a + value + carry_in
    cpu.set_flag(Flag.AC, aux_carry_add(a, value, carry_in))
    cpu.set_flag(Flag.C, result > 0xFF)
    cpu.set_register(Register.A, result)
    update_flags_szp(cpu, result)


# @intent:responsibility A から value (+borrow_in) を減算します。store=False なら比較のみ行います。
def _subtract(cpu: "I8085Cpu", value: int, borrow_in: int = 0, store: bool = True) -> None:
    a = cpu.get_register(Register.A)
    subtrahend = value + borrow_in
    result = (a - subtrahend) & 0xFF
    cpu.set_flag(Flag.AC, aux_carry_sub(a, value, borrow_in))
    if store or a != subtrahend:
        cpu.set_flag(Flag.C, a < subtrahend)
    if store:
        cpu.set_register(Register.A, result)
    update_flags_szp(cpu, result)


def _carry(cpu: "I8085Cpu") -> int:
    return 1 if cpu.get_flag(Flag.C) else 0


# --- 加算 ---

def add(cpu: "I8085Cpu", register: Optional[Register]) -> None:
    _add(cpu, get_operand_value(cpu, register))


def adi(cpu: "I8085Cpu", data: int) -> None:
    _add(cpu, data)


def adc(cpu: "I8085Cpu", register: Optional[Register]) -> None:
    _add(cpu, get_operand_value(cpu, register), _carry(cpu))
    cpu.set_flag(Flag.C, False)


def aci(cpu: "I8085Cpu", data: int) -> None:
    _add(cpu, data, _carry(cpu))
    cpu.set_flag(Flag.C, False)


# --- 減算・比較 ---

def sub(cpu: "I8085Cpu", register: Optional[Register]) -> None:
    _subtract(cpu, get_operand_value(cpu, register))


def sui(cpu: "I8085Cpu", data: int) -> None:
    _subtract(cpu, data)


def sbb(cpu: "I8085Cpu", register: Optional[Register]) -> None:
    _subtract(cpu, get_operand_value(cpu, register), _carry(cpu))
    cpu.set_flag(Flag.C, False)


def sbi(cpu: "I8085Cpu", data: int) -> None:
    _subtract(cpu, data, _carry(cpu))
    cpu.set_flag(Flag.C, False)


def cmp(cpu: "I8085Cpu", register: Optional[Register]) -> None:
    _subtract(cpu, get_operand_value(cpu, register), store=False)


def cpi(cpu: "I8085Cpu", data: int) -> None:
    _subtract(cpu, data, store=False)


# --- 論理演算 ---

def _logic(cpu: "I8085Cpu", result: int, aux_carry: bool) -> None:
    cpu.set_register(Register.A, result)
    cpu.set_flag(Flag.AC, aux_carry)
    cpu.set_flag(Flag.C, False)
    update_flags_szp(cpu, result)


def ana(cpu: "I8085Cpu", register: Optional[Register]) -> None:
    _logic(cpu, cpu.get_register(Register.A) & get_operand_value(cpu, register), True)


def ani(cpu: "I8085Cpu", data: int) -> None:
    _logic(cpu, cpu.get_register(Register.A) & data, True)


def ora(cpu: "I8085Cpu", register: Optional[Register]) -> None:
    _logic(cpu, cpu.get_register(Register.A) | get_operand_value(cpu, register), False)


def ori(cpu: "I8085Cpu", data: int) -> None:
    _logic(cpu, cpu.get_register(Register.A) | data, False)


def xra(cpu: "I8085Cpu", register: Optional[Register]) -> None:
    _logic(cpu, cpu.get_register(Register.A) ^ get_operand_value(cpu, register), False)


def xri(cpu: "I8085Cpu", data: int) -> None:
    _logic(cpu, cpu.get_register(Register.A) ^ data, False)


# --- インクリメント・デクリメント ---

def inr(cpu: "I8085Cpu", register: Optional[Register]) -> None:
    value = get_operand_value(cpu, register)
    result = (value + 1) & 0xFF
    set_operand_value(cpu, register, result)
    cpu.set_flag(Flag.AC, aux_carry_add(value, 1))
    update_flags_szp(cpu, result)


def dcr(cpu: "I8085Cpu", register: Optional[Register]) -> None:
    value = get_operand_value(cpu, register)
    result = (value - 1) & 0xFF
    set_operand_value(cpu, register, result)
    cpu.set_flag(Flag.AC, aux_carry_sub(value, 1))
    update_flags_szp(cpu, result)


def inx(cpu: "I8085Cpu", pair: RegisterPair) -> None:
    cpu.set_pair(pair, cpu.get_pair(pair) + 1)


def dcx(cpu: "I8085Cpu", pair: RegisterPair) -> None:
    cpu.set_pair(pair, cpu.get_pair(pair) - 1)


# @intent:responsibility HL にペアの値を加算します。C のみ更新します。
def dad(cpu: "I8085Cpu", pair: RegisterPair) -> None:
    total = cpu.get_pair(RegisterPair.H) + cpu.get_pair(pair)
    cpu.set_flag(Flag.C, total > 0xFFFF)
    cpu.set_pair(RegisterPair.H, total)


# --- アキュムレータ操作 ---

def cma(cpu: "I8085Cpu", _operand: None) -> None:
    cpu.set_register(Register.A, ~cpu.get_register(Register.A))


def cmc(cpu: "I8085Cpu", _operand: None) -> None:
    cpu.set_flag(Flag.C, not cpu.get_flag(Flag.C))


def stc(cpu: "I8085Cpu", _operand: None) -> None:
    cpu.set_flag(Flag.C, True)


# @intent:responsibility 直前の BCD 加算結果を10進補正します。
def daa(cpu: "I8085Cpu", _operand: None) -> None:
    a = cpu.get_register(Register.A)
    correction = 0
    carry = cpu.get_flag(Flag.C)
    if (a & 0x0F) > 9 or cpu.get_flag(Flag.AC):
        correction |= 0x06
    if a > 0x99 or carry:
        correction |= 0x60
        carry = True
    result = (a + correction) & 0xFF
    cpu.set_flag(Flag.AC, aux_carry_add(a, correction))
    cpu.set_flag(Flag.C, carry)
    cpu.set_register(Register.A, result)
    update_flags_szp(cpu, result)


# --- ローテート (C のみ更新) ---

def rlc(cpu: "I8085Cpu", _operand: None) -> None:
    a = cpu.get_register(Register.A)
    bit7 = a >> 7
    cpu.set_register(Register.A, (a << 1) | bit7)
    cpu.set_flag(Flag.C, bit7 == 1)


def rrc(cpu: "I8085Cpu", _operand: None) -> None:
    a = cpu.get_register(Register.A)
    bit0 = a & 0x01
    cpu.set_register(Register.A, (a >> 1) | (bit0 << 7))
    cpu.set_flag(Flag.C, bit0 == 1)


def ral(cpu: "I8085Cpu", _operand: None) -> None:
    a = cpu.get_register(Register.A)
    cpu.set_register(Register.A, (a << 1) | _carry(cpu))
    cpu.set_flag(Flag.C, (a & 0x80) != 0)


def rar(cpu: "I8085Cpu", _operand: None) -> None:
    a = cpu.get_register(Register.A)
    cpu.set_register(Register.A, (a >> 1) | (_carry(cpu) << 7))
    cpu.set_flag(Flag.C, (a & 0x01) != 0)
