# retro_8085/core/state.py
"""
Core Layer (CPU状態)

CPUの基本的な状態（PC と SP）を保持するデータ構造を定義します。
"""
from dataclasses import dataclass, replace


# @intent:responsibility 全アーキテクチャ共通のレジスタ状態を保持します。
@dataclass
class CpuState:
    """
    CPUのレジスタ状態を保持するデータクラス。
    アーキテクチャ固有のレジスタはサブクラスで追加します。
    """
    pc: int = 0x0000  # Program Counter
    sp: int = 0x0000  # Stack Pointer

    # @intent:responsibility Snapshot に格納するための独立したコピーを返します。
    # @intent:post-condition 戻り値への変更は元の状態に影響しません。
    def copy(self) -> "CpuState":
        return replace(self)
