# retro_8085/loader/assembler.py
"""
アセンブラの共通インターフェース。
アーキテクチャごとのアセンブラはこれを継承し、AssemblyLoader から利用されます。
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from retro_8085.common.errors import EmptyLabelError
from retro_8085.common.types import SourceMap, SymbolMap


# @intent:responsibility アセンブル結果を保持します。
@dataclass(frozen=True)
class AssemblyResult:
    """
    data: 生成された機械語。
    source_map: 行番号(0始まり) → その行の先頭バイトの data 上のオフセット。全ての行が登録されます。
    symbols: ラベル名 → 絶対アドレス (origin を含む)。
    """
    data: bytes
    source_map: SourceMap = field(default_factory=dict)
    symbols: SymbolMap = field(default_factory=dict)


# @intent:responsibility アセンブラの共通インターフェースと行の分解処理を定義します。
class BaseAssembler(ABC):
    @abstractmethod
    def compile(self, source: str, origin: int = 0) -> AssemblyResult:
        """
        ソース全体をアセンブルします。origin はラベルの絶対アドレスの基点です。
        """
        pass

    # @intent:responsibility 1行をラベル・ニーモニック・オペランドに分解します。
    # @intent:post-condition ニーモニックは小文字・単一空白区切り。命令のない行では None。
    def _parse_line(self, line: str) -> Tuple[Optional[str], Optional[str], List[str]]:
        """
        行の分解規則:
          - 小文字化し、';' 以降をコメントとして捨てる。
          - ':' があれば、その前をラベル名、後ろを命令部とする。
          - 命令部に ',' があれば、最初の ',' の前がニーモニック ("mov a" など)、後ろを空白で分割したものがオペランド。
          - ',' がなければ、空白で分割した先頭がニーモニック、残りがオペランド。
        """
        line = line.lower().split(';', 1)[0]

        label = None
        if ':' in line:
            label, line = line.split(':', 1)
            label = label.strip()
            if not label:
                raise EmptyLabelError()

        line = line.strip()
        if not line:
            return label, None, []

        if ',' in line:
            head, rest = line.split(',', 1)
            return label, " ".join(head.split()), rest.split()

        parts = line.split()
        return label, parts[0], parts[1:]
