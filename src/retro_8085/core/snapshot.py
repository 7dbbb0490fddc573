# retro_8085/core/snapshot.py
"""
実行状態の不変スナップショット

1命令の実行結果（実行後の状態、命令の内容、バスアクセス）を記録する
不変のデータ構造を定義します。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from retro_8085.core.state import CpuState
from retro_8085.transport.bus import BusAccess


# @intent:responsibility 実行された命令の詳細を記録します。
@dataclass(frozen=True)
class Operation:
    """
    実行された命令の詳細（HEX、ニーモニック、オペランド）を記録するデータクラス。
    """
    opcode_hex: str  # 例: "C3"
    mnemonic: str  # 例: "JMP"
    operands: List[str] = field(default_factory=list)  # 例: ["0400h"]
    operand_bytes: List[int] = field(default_factory=list)
    length: int = 1  # 命令のバイト長

    # @intent:responsibility アセンブラに再入力できる形式の命令テキストを返します。
    @property
    def text(self) -> str:
        if self.operands:
            return f"{self.mnemonic} {', '.join(self.operands)}"
        return self.mnemonic


@dataclass(frozen=True)
class Metadata:
    """
    実行に関するメタデータ（累計ステップ数、シンボル情報）。
    """
    step_count: int
    symbol_info: Optional[str] = None  # 例: "back: MOV A, M"


# @intent:responsibility ある一時点のCPUとバスの状態を不変に記録します。
@dataclass(frozen=True)
class Snapshot:
    """
    step() の戻り値。state は実行後の状態のコピーで、後続の実行の影響を受けません。
    """
    state: CpuState
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)
