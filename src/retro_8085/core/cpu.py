# retro_8085/core/cpu.py
"""
Core Layer (抽象CPU)

CPUの状態管理と命令サイクル（フェッチ→デコード→実行）の駆動を抽象化します。
具体的な命令の振る舞いは Instruction Layer に委譲されます。
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Tuple

from retro_8085.common.types import RegisterLayoutInfo, SymbolMap
from retro_8085.core.snapshot import Metadata, Operation, Snapshot
from retro_8085.core.state import CpuState
from retro_8085.transport.bus import Bus


# @intent:responsibility 抽象CPUの基本機能とインターフェースを定義します。
class AbstractCpu(ABC):
    """
    CPUエミュレーションの基底となる抽象クラス。
    Busとのインターフェース、状態管理、命令サイクルのテンプレートを提供します。
    """
    # @intent:pre-condition `bus`には命令とデータを置くメモリが登録されている必要があります。
    def __init__(self, bus: Bus):
        self._bus = bus
        self._state: CpuState = self._create_initial_state()
        self._step_count: int = 0
        self._symbol_map: SymbolMap = {}
        self._reverse_symbol_map: Dict[int, str] = {}
        # @intent:rationale 状態は get_state() 経由で参照し、変更はアーキテクチャ固有のアクセサを通す。

    # @intent:responsibility シンボルマップを設定します。
    def set_symbol_map(self, symbol_map: SymbolMap) -> None:
        """
        ラベル名とアドレスの対応表を設定します。Snapshot のシンボル情報に使われます。
        """
        self._symbol_map = dict(symbol_map)
        self._reverse_symbol_map = {addr: name for name, addr in symbol_map.items()}

    def get_symbol_map(self) -> SymbolMap:
        return self._symbol_map

    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        """
        CPUの初期状態を生成して返します。
        """
        pass

    # @intent:responsibility CPUを初期状態に戻します。メモリの内容は保持されます。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._step_count = 0

    def get_state(self) -> CpuState:
        """
        現在のCPUの状態を返します。戻り値は内部状態そのものです。
        """
        return self._state

    # @intent:responsibility PCの指すバイトを読み出し、PCを1進めます。
    @abstractmethod
    def _fetch(self) -> int:
        pass

    # @intent:responsibility オペコードを解析し、必要なオペランドバイトをフェッチして Operation を返します。
    @abstractmethod
    def _decode(self, opcode: int) -> Operation:
        pass

    # @intent:responsibility デコードされた命令を実行し、CPUの状態を更新します。
    @abstractmethod
    def _execute(self, operation: Operation) -> None:
        pass

    # @intent:responsibility CPUを1命令進め、その結果のスナップショットを返します。
    # @intent:rationale Template Method。PCの前進はフェッチごとに行うため、デコード後のPC更新段階は持たない。
    def step(self) -> Snapshot:
        """
        1命令をフェッチ・デコード・実行し、実行後の状態を Snapshot として返します。
        """
        self._bus.get_and_clear_activity_log()
        initial_pc = self._state.pc

        opcode = self._fetch()
        operation = self._decode(opcode)
        self._execute(operation)

        return self._create_snapshot(initial_pc, operation)

    def _create_snapshot(self, initial_pc: int, operation: Operation) -> Snapshot:
        bus_activity = self._bus.get_and_clear_activity_log()
        self._step_count += 1

        symbol_label = self._reverse_symbol_map.get(initial_pc, "")
        symbol_info = f"{symbol_label}: " if symbol_label else ""
        symbol_info += operation.text

        return Snapshot(
            state=self._state.copy(),
            operation=operation,
            metadata=Metadata(step_count=self._step_count, symbol_info=symbol_info),
            bus_activity=bus_activity
        )

    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        """
        現在のレジスタ値を名前付きの辞書で返す。
        表示側がCPUの内部構造を知らなくても値を表示できるようにするために使用される。
        """
        pass

    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        pass

    @abstractmethod
    def get_flag_state(self) -> Dict[str, bool]:
        pass

    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        """
        指定されたメモリ範囲を逆アセンブルし、(address, hex_bytes, text) のリストを返す。
        """
        pass
