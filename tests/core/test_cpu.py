# tests/core/test_cpu.py
"""
retro_8085.core.cpu モジュールの単体テスト。
"""
import pytest
from typing import Dict, List, Tuple

from retro_8085.common.types import RegisterInfo, RegisterLayoutInfo
from retro_8085.core.cpu import AbstractCpu
from retro_8085.core.snapshot import Operation, Snapshot
from retro_8085.core.state import CpuState
from retro_8085.transport.bus import RAM, Bus, BusAccessType

# @intent:test_suite 抽象CPUの命令サイクルのテンプレートと状態管理を検証します。


class StubCpu(AbstractCpu):
    """
    1バイト命令のみを持つテスト用CPU。実行時に 0x0020 へ 0xFF を書き込みます。
    """
    def __init__(self, bus: Bus, initial_pc: int = 0x0000, initial_sp: int = 0x0000):
        self._initial_pc = initial_pc
        self._initial_sp = initial_sp
        super().__init__(bus)

    def _create_initial_state(self) -> CpuState:
        return CpuState(pc=self._initial_pc, sp=self._initial_sp)

    def _fetch(self) -> int:
        opcode = self._bus.read(self._state.pc)
        self._state.pc += 1
        return opcode

    def _decode(self, opcode: int) -> Operation:
        if opcode == 0x00:
            return Operation(opcode_hex=f"{opcode:02X}", mnemonic="NOP")
        return Operation(opcode_hex=f"{opcode:02X}", mnemonic="UNKNOWN", operands=[f"{opcode:02X}h"])

    def _execute(self, operation: Operation) -> None:
        self._bus.write(0x0020, 0xFF)

    def get_register_map(self) -> Dict[str, int]:
        return {"PC": self._state.pc, "SP": self._state.sp}

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [RegisterLayoutInfo("Test Group", [RegisterInfo("PC", 16), RegisterInfo("SP", 16)])]

    def get_flag_state(self) -> Dict[str, bool]:
        return {"Z": False}

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return [(start_addr + i, "00", "NOP") for i in range(length)]


class TestCpuState:
    def test_cpu_state_init_default(self):
        state = CpuState()
        assert state.pc == 0x0000
        assert state.sp == 0x0000

    # @intent:test_case_copy copy() が独立したインスタンスを返すことを検証します。
    def test_copy_is_independent(self):
        state = CpuState(pc=0x1234, sp=0xABCD)
        copied = state.copy()
        copied.pc = 0
        assert state.pc == 0x1234
        assert copied.sp == 0xABCD


class TestAbstractCpu:
    @pytest.fixture
    def setup_cpu(self):
        bus = Bus()
        ram = RAM(256)
        bus.register_device(0x0000, 0x00FF, ram)
        cpu = StubCpu(bus, initial_pc=0x0010, initial_sp=0x00F0)
        return cpu, bus, ram

    def test_abstract_cpu_reset(self, setup_cpu):
        cpu, _, _ = setup_cpu
        cpu.get_state().pc = 0x00AA
        cpu.reset()
        state = cpu.get_state()
        assert state.pc == 0x0010
        assert state.sp == 0x00F0

    # @intent:test_case_step step() がフェッチ・デコード・実行を行い、そのステップのバスアクセスを Snapshot に含めることを検証します。
    def test_abstract_cpu_step(self, setup_cpu):
        cpu, bus, _ = setup_cpu
        bus.write(0x0010, 0x12)

        snapshot = cpu.step()

        assert isinstance(snapshot, Snapshot)
        assert snapshot.state.pc == 0x0011
        assert snapshot.state == cpu.get_state()
        assert snapshot.state is not cpu.get_state()
        assert snapshot.operation.mnemonic == "UNKNOWN"
        assert snapshot.metadata.step_count == 1
        assert snapshot.metadata.symbol_info == "UNKNOWN 12h"
        assert [(a.address, a.data, a.access_type) for a in snapshot.bus_activity] == [
            (0x0010, 0x12, BusAccessType.READ),
            (0x0020, 0xFF, BusAccessType.WRITE),
        ]

    def test_step_count_accumulates(self, setup_cpu):
        cpu, _, _ = setup_cpu
        cpu.step()
        assert cpu.step().metadata.step_count == 2
        cpu.reset()
        assert cpu.step().metadata.step_count == 1

    def test_symbol_map(self, setup_cpu):
        cpu, _, _ = setup_cpu
        cpu.set_symbol_map({"entry": 0x0010})
        assert cpu.get_symbol_map() == {"entry": 0x0010}
        assert cpu.step().metadata.symbol_info == "entry: NOP"
