# retro_8085/arch/i8085/instructions/control.py
"""
分岐・サブルーチン・割り込み制御・I/O命令の実行ロジック。
"""
from typing import TYPE_CHECKING, Callable

from retro_8085.arch.i8085.instructions.base import Action
from retro_8085.arch.i8085.state import Flag, Register, RegisterPair

if TYPE_CHECKING:
    from retro_8085.arch.i8085.cpu import I8085Cpu

Condition = Callable[["I8085Cpu"], bool]

# 割り込みマスクの割り込み許可ビット
INTERRUPT_ENABLE = 0x08
# SIM: A のビット3 (MSE) が1のとき、ビット0-2 (M5.5/M6.5/M7.5) をマスクへ設定
SIM_MASK_SET_ENABLE = 0x08
SIM_MASK_BITS = 0x07


def always(cpu: "I8085Cpu") -> bool:
    return True


def flag_set(flag: Flag) -> Condition:
    return lambda cpu: cpu.get_flag(flag)


def flag_clear(flag: Flag) -> Condition:
    return lambda cpu: not cpu.get_flag(flag)


# @intent:responsibility 条件成立時にオペランドのアドレスへ分岐する動作を生成します。
def jump_if(condition: Condition) -> Action:
    def jump(cpu: "I8085Cpu", address: int) -> None:
        if condition(cpu):
            cpu.pc = address
    return jump


# @intent:responsibility 条件成立時に戻り番地(次の命令)をプッシュして分岐する動作を生成します。
def call_if(condition: Condition) -> Action:
    def call(cpu: "I8085Cpu", address: int) -> None:
        if condition(cpu):
            cpu.push_word(cpu.pc)
            cpu.pc = address
    return call


def return_if(condition: Condition) -> Action:
    def ret(cpu: "I8085Cpu", _operand: None) -> None:
        if condition(cpu):
            cpu.pc = cpu.pop_word()
    return ret


# @intent:responsibility RST n。アドレス 8*n へのサブルーチン呼び出しです。
def rst(cpu: "I8085Cpu", index: int) -> None:
    cpu.push_word(cpu.pc)
    cpu.pc = 8 * index


def pchl(cpu: "I8085Cpu", _operand: None) -> None:
    cpu.pc = cpu.get_pair(RegisterPair.H)


def nop(cpu: "I8085Cpu", _operand: None) -> None:
    pass


# @intent:responsibility HALT を通知します。状態は変化しません。
def hlt(cpu: "I8085Cpu", _operand: None) -> None:
    cpu.signal_halted()


# --- 割り込み制御 ---

def ei(cpu: "I8085Cpu", _operand: None) -> None:
    cpu.interrupt_mask = cpu.interrupt_mask | INTERRUPT_ENABLE


def di(cpu: "I8085Cpu", _operand: None) -> None:
    cpu.interrupt_mask = cpu.interrupt_mask & ~INTERRUPT_ENABLE


# @intent:responsibility 割り込みマスクを A に読み出します。
def rim(cpu: "I8085Cpu", _operand: None) -> None:
    cpu.set_register(Register.A, cpu.interrupt_mask)


def sim(cpu: "I8085Cpu", _operand: None) -> None:
    a = cpu.get_register(Register.A)
    if a & SIM_MASK_SET_ENABLE:
        cpu.interrupt_mask = (cpu.interrupt_mask & ~SIM_MASK_BITS) | (a & SIM_MASK_BITS)


# --- I/O ---

def in_port(cpu: "I8085Cpu", port: int) -> None:
    cpu.set_register(Register.A, cpu.read_port(port))


def out_port(cpu: "I8085Cpu", port: int) -> None:
    cpu.write_port(port, cpu.get_register(Register.A))
