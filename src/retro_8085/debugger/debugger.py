# retro_8085/debugger/debugger.py
"""
8085 デバッガ。

I8085Cpu をステップ実行し、ブレークポイント条件・HLT・ステップ上限のいずれかで停止させます。
実行した各ステップの Snapshot は履歴として保持されます。
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from retro_8085.arch.i8085.cpu import HALT_OPCODE, I8085Cpu
from retro_8085.core.snapshot import Snapshot
from retro_8085.transport.bus import BusAccessType

logger = logging.getLogger(__name__)


# @intent:responsibility ブレークポイント条件の種類です。
class BreakpointConditionType(Enum):
    PC_MATCH = "PC_MATCH"               # 次に実行する命令のアドレス
    MEMORY_READ = "MEMORY_READ"         # アドレスからの読み出し
    MEMORY_WRITE = "MEMORY_WRITE"       # アドレスへの書き込み
    IO_READ = "IO_READ"                 # IN 命令によるポート入力
    IO_WRITE = "IO_WRITE"               # OUT 命令によるポート出力
    REGISTER_VALUE = "REGISTER_VALUE"   # レジスタが指定値と等しい
    REGISTER_CHANGE = "REGISTER_CHANGE" # ステップの前後でレジスタ値が異なる


_ACCESS_TYPES = {
    BreakpointConditionType.MEMORY_READ: BusAccessType.READ,
    BreakpointConditionType.MEMORY_WRITE: BusAccessType.WRITE,
    BreakpointConditionType.IO_READ: BusAccessType.IO_READ,
    BreakpointConditionType.IO_WRITE: BusAccessType.IO_WRITE,
}


# @intent:responsibility 1つのブレークポイント条件です。
@dataclass(frozen=True)
class BreakpointCondition:
    """
    register_name には get_register_map() のキー ("A", "HL", "SP" など) を指定します。
    """
    condition_type: BreakpointConditionType
    value: Optional[int] = None           # PC_MATCH のアドレス、REGISTER_VALUE の値
    address: Optional[int] = None         # MEMORY_* のアドレス、IO_* のポート番号
    register_name: Optional[str] = None   # REGISTER_VALUE, REGISTER_CHANGE
    enabled: bool = True


# @intent:responsibility run() が停止した理由です。
class StopReason(Enum):
    BREAKPOINT = "BREAKPOINT"
    HALTED = "HALTED"
    MAX_STEPS = "MAX_STEPS"
    END_OF_MEMORY = "END_OF_MEMORY"
    STOPPED = "STOPPED"


# @intent:responsibility CPUの実行制御とブレークポイント管理を行います。
class Debugger:
    """
    I8085Cpu の実行制御。ブレークポイントと実行履歴を持ちます。
    """
    def __init__(self, cpu: I8085Cpu):
        self._cpu = cpu
        self._breakpoints: List[BreakpointCondition] = []
        self._running: bool = False
        self._previous_registers: Dict[str, int] = cpu.get_register_map()
        self._last_snapshot: Optional[Snapshot] = None
        self._history: List[Snapshot] = []

    def add_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition not in self._breakpoints:
            self._breakpoints.append(condition)

    def remove_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition in self._breakpoints:
            self._breakpoints.remove(condition)

    def get_breakpoints(self) -> List[BreakpointCondition]:
        return list(self._breakpoints)

    def get_history(self) -> List[Snapshot]:
        return list(self._history)

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    def _pc_breakpoint_hit(self, pc: int) -> bool:
        return any(
            bp.enabled and bp.condition_type == BreakpointConditionType.PC_MATCH and bp.value == pc
            for bp in self._breakpoints
        )

    # @intent:responsibility Snapshot に基づいて PC_MATCH 以外のブレークポイントを判定します。
    def _check_other_breakpoints(self, snapshot: Snapshot) -> bool:
        registers = self._cpu.get_register_map()

        for bp in self._breakpoints:
            if not bp.enabled:
                continue

            access_type = _ACCESS_TYPES.get(bp.condition_type)
            if access_type is not None:
                for access in snapshot.bus_activity:
                    if access.access_type == access_type and access.address == bp.address:
                        return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_VALUE and bp.register_name:
                if registers.get(bp.register_name.upper()) == bp.value:
                    return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_CHANGE and bp.register_name:
                name = bp.register_name.upper()
                if name in registers and registers[name] != self._previous_registers.get(name):
                    return True
        return False

    def step_instruction(self) -> Snapshot:
        """
        1命令を実行し、Snapshot を履歴に追加して返します。
        """
        self._previous_registers = self._cpu.get_register_map()
        snapshot = self._cpu.step()
        self._last_snapshot = snapshot
        self._history.append(snapshot)
        return snapshot

    # @intent:responsibility 停止条件を満たすまで命令を実行し、停止理由を返します。
    def run(self, max_steps: Optional[int] = None) -> StopReason:
        """
        停止条件を満たすまで実行します。
        開始時点の PC にあるブレークポイントでは停止せず、その命令から実行を始めます。
        HLT は実行してから停止します（HALTED が通知されます）。
        """
        self._running = True
        steps = 0
        first = True

        while self._running:
            pc = self._cpu.pc
            if pc >= self._cpu.memory_size:
                self._running = False
                return StopReason.END_OF_MEMORY

            if not first and self._pc_breakpoint_hit(pc):
                self._running = False
                logger.info("Breakpoint hit at PC: %04Xh", pc)
                return StopReason.BREAKPOINT
            first = False

            if max_steps is not None and steps >= max_steps:
                self._running = False
                return StopReason.MAX_STEPS

            is_halt = self._cpu.bus.peek(pc) == HALT_OPCODE
            snapshot = self.step_instruction()
            steps += 1

            if is_halt:
                self._running = False
                return StopReason.HALTED

            if self._check_other_breakpoints(snapshot):
                self._running = False
                logger.info("Breakpoint hit at PC: %04Xh", snapshot.state.pc)
                return StopReason.BREAKPOINT

        return StopReason.STOPPED

    def stop(self) -> None:
        self._running = False
