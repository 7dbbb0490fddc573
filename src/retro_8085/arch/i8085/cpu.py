# retro_8085/arch/i8085/cpu.py
"""
Intel 8085 CPUエミュレーションの中心モジュール。

命令は1ステップで完全に実行されます（サイクル単位の再現は行いません）。
状態の変更は全てアクセサを通り、値が実際に変化した場合のみ購読者へ通知されます。
"""
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from retro_8085.arch.i8085 import disassembler
from retro_8085.arch.i8085.alu import pack_flags, unpack_flags
from retro_8085.arch.i8085.instructions import decode_opcode, execute_instruction, lookup_opcode
from retro_8085.arch.i8085.state import Flag, I8085CpuState, Register, RegisterPair
from retro_8085.common.errors import MemoryAccessError, UnknownOpcodeError
from retro_8085.common.types import RegisterInfo, RegisterLayoutInfo
from retro_8085.core.cpu import AbstractCpu
from retro_8085.core.events import CpuEvent, EventHub
from retro_8085.core.snapshot import Operation
from retro_8085.transport.bus import RAM, Bus

logger = logging.getLogger(__name__)

HALT_OPCODE = 0x76
DEFAULT_MEMORY_SIZE = 0x10000


# @intent:responsibility 8085 CPU の命令実行とレジスタ・メモリへのアクセスを提供します。
class I8085Cpu(AbstractCpu):
    """
    Intel 8085 CPUをエミュレートするクラス。
    memory_size バイトの RAM をアドレス0から配置したバスを内部に持ちます。
    """
    # @intent:pre-condition memory_size は 1 から 0x10000 の範囲である必要があります。
    def __init__(self, memory_size: int = DEFAULT_MEMORY_SIZE):
        if not isinstance(memory_size, int) or not 0 < memory_size <= DEFAULT_MEMORY_SIZE:
            raise ValueError(f"Memory size must be between 1 and {DEFAULT_MEMORY_SIZE}, got {memory_size}.")
        bus = Bus()
        bus.register_device(0x0000, memory_size - 1, RAM(memory_size))
        self._memory_size = memory_size
        self._events = EventHub()
        super().__init__(bus)

    def _create_initial_state(self) -> I8085CpuState:
        return I8085CpuState()

    def get_state(self) -> I8085CpuState:
        return self._state

    @property
    def bus(self) -> Bus:
        return self._bus

    @property
    def memory_size(self) -> int:
        return self._memory_size

    # -----------------------------------------------------------------------
    # 通知
    # -----------------------------------------------------------------------

    # @intent:responsibility 状態変化の購読を登録します。
    # @intent:pre-condition key は REGISTER_CHANGED には Register、FLAG_CHANGED には Flag を渡します。
    def subscribe(self, event: CpuEvent, callback: Callable[..., None], key: Optional[Any] = None) -> None:
        self._events.subscribe(event, callback, key)

    def unsubscribe(self, event: CpuEvent, callback: Callable[..., None], key: Optional[Any] = None) -> None:
        self._events.unsubscribe(event, callback, key)

    def signal_halted(self) -> None:
        self._events.emit(CpuEvent.HALTED)

    # -----------------------------------------------------------------------
    # レジスタ・フラグ
    # -----------------------------------------------------------------------

    @property
    def pc(self) -> int:
        return self._state.pc

    @pc.setter
    def pc(self, value: int) -> None:
        value &= 0xFFFF
        if self._state.pc != value:
            self._state.pc = value
            self._events.emit(CpuEvent.PC_CHANGED, value)

    @property
    def sp(self) -> int:
        return self._state.sp

    @sp.setter
    def sp(self, value: int) -> None:
        value &= 0xFFFF
        if self._state.sp != value:
            self._state.sp = value
            self._events.emit(CpuEvent.SP_CHANGED, value)

    @property
    def interrupt_mask(self) -> int:
        return self._state.interrupt_mask

    @interrupt_mask.setter
    def interrupt_mask(self, value: int) -> None:
        value &= 0xFF
        if self._state.interrupt_mask != value:
            self._state.interrupt_mask = value
            self._events.emit(CpuEvent.INTERRUPT_MASK_CHANGED, value)

    def get_register(self, register: Register) -> int:
        return self._state.registers[register]

    def set_register(self, register: Register, value: int) -> None:
        value &= 0xFF
        if self._state.registers[register] != value:
            self._state.registers[register] = value
            self._events.emit(CpuEvent.REGISTER_CHANGED, register, value, key=register)

    def get_flag(self, flag: Flag) -> bool:
        return self._state.flags[flag]

    def set_flag(self, flag: Flag, value: bool) -> None:
        value = bool(value)
        if self._state.flags[flag] != value:
            self._state.flags[flag] = value
            self._events.emit(CpuEvent.FLAG_CHANGED, flag, value, key=flag)

    # @intent:responsibility レジスタペアの16bit値を返します。PSW は A を上位、フラグを下位とします。
    def get_pair(self, pair: RegisterPair) -> int:
        if pair is RegisterPair.SP:
            return self._state.sp
        if pair is RegisterPair.PSW:
            return (self.get_register(Register.A) << 8) | pack_flags(self._state.flags)
        high, low = pair.registers
        return (self.get_register(high) << 8) | self.get_register(low)

    def set_pair(self, pair: RegisterPair, value: int) -> None:
        value &= 0xFFFF
        if pair is RegisterPair.SP:
            self.sp = value
            return
        if pair is RegisterPair.PSW:
            self.set_register(Register.A, value >> 8)
            for flag, is_set in unpack_flags(value & 0xFF).items():
                self.set_flag(flag, is_set)
            return
        high, low = pair.registers
        self.set_register(high, value >> 8)
        self.set_register(low, value & 0xFF)

    # -----------------------------------------------------------------------
    # メモリ・I/O
    # -----------------------------------------------------------------------

    # @intent:post-condition 実装メモリ外へのアクセスは MemoryAccessError として実行時エラーに揃えます。
    def read_memory(self, address: int) -> int:
        address &= 0xFFFF
        try:
            return self._bus.read(address)
        except IndexError as e:
            raise MemoryAccessError(address, "read") from e

    def write_memory(self, address: int, value: int) -> None:
        address &= 0xFFFF
        try:
            self._bus.write(address, value & 0xFF)
        except IndexError as e:
            raise MemoryAccessError(address, "write") from e

    # @intent:responsibility プログラムやデータをメモリへ直接配置します。バスアクセスとしては記録されません。
    # @intent:pre-condition address から配置するバイト列がメモリ範囲内に収まる必要があります。
    def set_memory(self, address: int, *data: Union[int, bytes, bytearray, List[int]]) -> None:
        """
        address から順にバイトを書き込みます。
        set_memory(0x400, 0x21, 0x05) と set_memory(0x400, b"\\x21\\x05") のどちらの形式も受け付けます。
        """
        if len(data) == 1 and isinstance(data[0], (bytes, bytearray, list, tuple)):
            data = tuple(data[0])
        for offset, value in enumerate(data):
            self._bus.load(address + offset, value)

    def get_memory(self, address: int, length: int = 1) -> bytes:
        return bytes(self._bus.peek(address + offset) for offset in range(length))

    def read_port(self, port: int) -> int:
        return self._bus.read_io(port & 0xFF)

    def write_port(self, port: int, value: int) -> None:
        self._bus.write_io(port & 0xFF, value & 0xFF)

    # @intent:responsibility 16bit値をスタックへ積みます。下位バイトが SP-2、上位バイトが SP-1 に置かれます。
    def push_word(self, value: int) -> None:
        sp = self._state.sp
        self.write_memory(sp - 1, (value >> 8) & 0xFF)
        self.write_memory(sp - 2, value & 0xFF)
        self.sp = sp - 2

    def pop_word(self) -> int:
        sp = self._state.sp
        low = self.read_memory(sp)
        high = self.read_memory(sp + 1)
        self.sp = sp + 2
        return (high << 8) | low

    # -----------------------------------------------------------------------
    # 命令サイクル
    # -----------------------------------------------------------------------

    # @intent:responsibility PC の指すバイトを読み出し、PC を1進めます。
    def _fetch(self) -> int:
        value = self.read_memory(self._state.pc)
        self.pc = self._state.pc + 1
        return value

    # @intent:responsibility オペコードを解決し、オペランドバイトをフェッチします。
    # @intent:post-condition 未知のオペコードでは UnknownOpcodeError を送出し、状態はフェッチ直後のままです。
    def _decode(self, opcode: int) -> Operation:
        entry = lookup_opcode(opcode)
        if entry is None:
            address = (self._state.pc - 1) & 0xFFFF
            logger.debug("Unknown opcode %02Xh at %04Xh", opcode, address)
            raise UnknownOpcodeError(opcode, address)
        operand_bytes = [self._fetch() for _ in range(entry.descriptor.operand_kind.extra_bytes)]
        return decode_opcode(opcode, operand_bytes)

    def _execute(self, operation: Operation) -> None:
        execute_instruction(operation, self)

    # @intent:responsibility HLT に到達するかメモリ末尾を越えるまで命令を実行します。
    # @intent:rationale HLT 自体は実行しないため、run() では HALTED は通知されません。
    def run(self) -> None:
        """
        PC の指すバイトが HLT (0x76) になるか、PC がメモリサイズ以上になるまで step() を繰り返します。
        無限ループするプログラムでは戻りません。
        """
        while self._state.pc < self._memory_size and self._bus.peek(self._state.pc) != HALT_OPCODE:
            self.step()

    # -----------------------------------------------------------------------
    # 表示用インターフェース
    # -----------------------------------------------------------------------

    def get_register_map(self) -> Dict[str, int]:
        registers = {register.name: value for register, value in self._state.registers.items()}
        registers.update({
            "BC": self.get_pair(RegisterPair.B),
            "DE": self.get_pair(RegisterPair.D),
            "HL": self.get_pair(RegisterPair.H),
            "PSW": self.get_pair(RegisterPair.PSW),
            "PC": self._state.pc,
            "SP": self._state.sp,
            "IM": self._state.interrupt_mask,
        })
        return registers

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("Registers", [
                RegisterInfo("A", 8),
                RegisterInfo("BC", 16),
                RegisterInfo("DE", 16),
                RegisterInfo("HL", 16),
                RegisterInfo("PSW", 16),
            ]),
            RegisterLayoutInfo("Control", [
                RegisterInfo("PC", 16),
                RegisterInfo("SP", 16),
                RegisterInfo("IM", 8),
            ]),
        ]

    def get_flag_state(self) -> Dict[str, bool]:
        return {flag.name: value for flag, value in self._state.flags.items()}

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._bus, start_addr, length)
