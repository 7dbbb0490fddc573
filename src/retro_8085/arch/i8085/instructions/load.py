# retro_8085/arch/i8085/instructions/load.py
"""
データ転送命令とスタック命令の実行ロジック。
"""
from typing import TYPE_CHECKING, Optional

from retro_8085.arch.i8085.instructions.base import Action, get_operand_value, set_operand_value
from retro_8085.arch.i8085.state import Register, RegisterPair

if TYPE_CHECKING:
    from retro_8085.arch.i8085.cpu import I8085Cpu


# --- MOV / MVI / LXI (転送先がニーモニックに含まれる命令) ---

# @intent:responsibility 転送先を固定した MOV の動作を生成します。None は M を表します。
def mov_to(destination: Optional[Register]) -> Action:
    def mov(cpu: "I8085Cpu", source: Optional[Register]) -> None:
        set_operand_value(cpu, destination, get_operand_value(cpu, source))
    return mov


def mvi_to(destination: Optional[Register]) -> Action:
    def mvi(cpu: "I8085Cpu", data: int) -> None:
        set_operand_value(cpu, destination, data)
    return mvi


def lxi_to(pair: RegisterPair) -> Action:
    def lxi(cpu: "I8085Cpu", word: int) -> None:
        cpu.set_pair(pair, word)
    return lxi


# --- 直接アドレス指定 ---

def lda(cpu: "I8085Cpu", address: int) -> None:
    cpu.set_register(Register.A, cpu.read_memory(address))


def sta(cpu: "I8085Cpu", address: int) -> None:
    cpu.write_memory(address, cpu.get_register(Register.A))


# @intent:responsibility address から L、address+1 から H を読み込みます。
def lhld(cpu: "I8085Cpu", address: int) -> None:
    cpu.set_register(Register.L, cpu.read_memory(address))
    cpu.set_register(Register.H, cpu.read_memory(address + 1))


def shld(cpu: "I8085Cpu", address: int) -> None:
    cpu.write_memory(address, cpu.get_register(Register.L))
    cpu.write_memory(address + 1, cpu.get_register(Register.H))


# --- レジスタ間接 ---

def ldax(cpu: "I8085Cpu", pair: RegisterPair) -> None:
    cpu.set_register(Register.A, cpu.read_memory(cpu.get_pair(pair)))


def stax(cpu: "I8085Cpu", pair: RegisterPair) -> None:
    cpu.write_memory(cpu.get_pair(pair), cpu.get_register(Register.A))


def xchg(cpu: "I8085Cpu", _operand: None) -> None:
    de = cpu.get_pair(RegisterPair.D)
    cpu.set_pair(RegisterPair.D, cpu.get_pair(RegisterPair.H))
    cpu.set_pair(RegisterPair.H, de)


# --- スタック ---

def push(cpu: "I8085Cpu", pair: RegisterPair) -> None:
    cpu.push_word(cpu.get_pair(pair))


def pop(cpu: "I8085Cpu", pair: RegisterPair) -> None:
    cpu.set_pair(pair, cpu.pop_word())


# @intent:responsibility スタックトップの2バイトと L/H を交換します。SP は変化しません。
def xthl(cpu: "I8085Cpu", _operand: None) -> None:
    sp = cpu.sp
    low = cpu.read_memory(sp)
    high = cpu.read_memory(sp + 1)
    cpu.write_memory(sp, cpu.get_register(Register.L))
    cpu.write_memory(sp + 1, cpu.get_register(Register.H))
    cpu.set_register(Register.L, low)
    cpu.set_register(Register.H, high)


def sphl(cpu: "I8085Cpu", _operand: None) -> None:
    cpu.sp = cpu.get_pair(RegisterPair.H)
