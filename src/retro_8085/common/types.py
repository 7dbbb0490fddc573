"""
共通の型定義を提供するモジュール。
アセンブラ、CPU、デバッガの各層で共有する型エイリアスを定義します。
"""
from typing import Dict, List, NamedTuple

# @intent:data_structure ラベル名と絶対アドレスの対応表。AssemblyResult.symbols と CPU のシンボル表示で共有されます。
SymbolMap = Dict[str, int]

# @intent:data_structure 行番号(0始まり)から、その行が生成した最初のバイトのオフセットへの対応表。
SourceMap = Dict[int, int]

# @intent:data_structure 単一レジスタの表示定義。
class RegisterInfo(NamedTuple):
    name: str
    width: int  # ビット幅 (8 or 16)

# @intent:data_structure レジスタグループの表示定義（例: "Registers", "Control"）。
class RegisterLayoutInfo(NamedTuple):
    group_name: str
    registers: List[RegisterInfo]
