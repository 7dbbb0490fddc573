"""
8085命令セット実装パッケージ。
"""
from typing import TYPE_CHECKING, List, Optional, Sequence

from retro_8085.core.snapshot import Operation
from retro_8085.arch.i8085.instructions.base import CatalogEntry, OperandKind, operand_name
from .maps import MNEMONIC_MAP, OPCODE_MAP

if TYPE_CHECKING:
    from retro_8085.arch.i8085.cpu import I8085Cpu


def lookup_opcode(opcode: int) -> Optional[CatalogEntry]:
    return OPCODE_MAP.get(opcode)


# @intent:responsibility エントリとオペランドバイトから表示用オペランド文字列を作ります。
def format_operands(entry: CatalogEntry, operand_bytes: Sequence[int]) -> List[str]:
    kind = entry.descriptor.operand_kind
    if kind is OperandKind.NONE:
        return []
    if kind is OperandKind.DATA8:
        return [f"{operand_bytes[0]:02X}h"]
    if kind in (OperandKind.DATA16, OperandKind.LABEL_ADDRESS16):
        return [f"{entry.resolve_operand(operand_bytes):04X}h"]
    return [operand_name(entry.operand)]


# @intent:responsibility オペコードとオペランドバイトを8085の命令としてデコードします。
# @intent:pre-condition operand_bytes は命令長-1 バイト分揃っている必要があります。
def decode_opcode(opcode: int, operand_bytes: Sequence[int]) -> Operation:
    """
    8085のオペコードをデコードし、Operationオブジェクトを返します。
    "mov a" のような複合ニーモニックは、2語目以降を先頭オペランドとして表示します。
    未知のオペコードの場合は KeyError を送出します。
    """
    entry = OPCODE_MAP[opcode]
    words = entry.descriptor.mnemonic.upper().split()
    return Operation(
        opcode_hex=f"{opcode:02X}",
        mnemonic=words[0],
        operands=words[1:] + format_operands(entry, operand_bytes),
        operand_bytes=list(operand_bytes),
        length=entry.descriptor.length,
    )


# @intent:responsibility デコードされた命令を実行し、CPUの状態を変更します。
def execute_instruction(operation: Operation, cpu: "I8085Cpu") -> None:
    entry = OPCODE_MAP[int(operation.opcode_hex, 16)]
    entry.execute(cpu, operation.operand_bytes)
