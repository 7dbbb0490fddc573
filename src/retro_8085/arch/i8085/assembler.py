# retro_8085/arch/i8085/assembler.py
"""
Intel 8085 アセンブラ。

命令表 (MNEMONIC_MAP) を参照して1パスで機械語を生成し、ラベル参照は最後にまとめて解決します。
"""
import logging
from typing import Dict, List, Optional, Tuple

from retro_8085.arch.i8085.instructions.base import InstructionDescriptor, OperandKind, operand_name
from retro_8085.arch.i8085.instructions.maps import MNEMONIC_MAP
from retro_8085.common.errors import (
    AssemblerError,
    AssemblyError,
    DuplicateLabelError,
    InvalidRegisterError,
    InvalidRegisterPairError,
    OperandCountError,
    UndefinedLabelError,
    UnknownMnemonicError,
)
from retro_8085.loader.assembler import AssemblyResult, BaseAssembler
from retro_8085.loader.literals import parse8, parse16, parse_index

logger = logging.getLogger(__name__)

# ラベル参照の仮オペランド。解決後に実アドレスで上書きされます。
LABEL_PLACEHOLDER = 0xFF


class I8085Assembler(BaseAssembler):
    """
    Intel 8085 用アセンブラ。
    インスタンスは状態を持たず、compile() を何度呼んでも同じ結果になります。
    """

    def __init__(self, mnemonic_map: Optional[Dict[str, InstructionDescriptor]] = None):
        self._mnemonic_map = MNEMONIC_MAP if mnemonic_map is None else mnemonic_map

    def compile(self, source: str, origin: int = 0) -> AssemblyResult:
        """
        ソースをアセンブルします。
        失敗した場合は、原因と0始まりの行番号を持つ AssemblyError を送出します。
        """
        data = bytearray()
        source_map: Dict[int, int] = {}
        labels: Dict[str, int] = {}
        # 命令先頭のオフセット → (ラベル名, 参照した行番号)
        usages: Dict[int, Tuple[str, int]] = {}

        for line_number, line in enumerate(source.splitlines()):
            source_map[line_number] = len(data)
            try:
                label, mnemonic, operands = self._parse_line(line)
                if label is not None:
                    if label in labels:
                        raise DuplicateLabelError(label)
                    labels[label] = len(data)
                if mnemonic is not None:
                    offset = len(data)
                    data.extend(self._encode(mnemonic, operands, offset, line_number, usages))
            except AssemblerError as e:
                logger.debug("Assembly failed at line %d: %s", line_number, e.message)
                raise AssemblyError(line_number, e) from e

        for offset, (name, line_number) in usages.items():
            if name not in labels:
                error = UndefinedLabelError(name)
                logger.debug("Assembly failed at line %d: %s", line_number, error.message)
                raise AssemblyError(line_number, error) from error
            address = (labels[name] + origin) & 0xFFFF
            data[offset + 1] = address & 0xFF
            data[offset + 2] = (address >> 8) & 0xFF

        symbols = {name: (offset + origin) & 0xFFFF for name, offset in labels.items()}
        logger.debug("Assembled %d bytes, %d labels, origin %04Xh", len(data), len(symbols), origin)
        return AssemblyResult(data=bytes(data), source_map=source_map, symbols=symbols)

    # @intent:responsibility 1命令分の機械語を生成します。ラベル参照は usages に登録します。
    def _encode(
        self,
        mnemonic: str,
        operands: List[str],
        offset: int,
        line_number: int,
        usages: Dict[int, Tuple[str, int]],
    ) -> List[int]:
        descriptor = self._mnemonic_map.get(mnemonic)
        if descriptor is None:
            raise UnknownMnemonicError(mnemonic)

        kind = descriptor.operand_kind
        if len(operands) != kind.operand_count:
            raise OperandCountError(kind.operand_count, len(operands))

        if kind is OperandKind.NONE:
            return [descriptor.code]

        operand = operands[0]
        if kind is OperandKind.DATA8:
            return [descriptor.code, parse8(operand)]
        if kind is OperandKind.DATA16:
            low, high = parse16(operand)
            return [descriptor.code, low, high]
        if kind is OperandKind.LABEL_ADDRESS16:
            usages[offset] = (operand, line_number)
            return [descriptor.code, LABEL_PLACEHOLDER, LABEL_PLACEHOLDER]
        if kind is OperandKind.INDEX3:
            return [descriptor.opcode_for(parse_index(operand))]

        return [descriptor.opcode_for(self._resolve_register(kind, operand))]

    # @intent:responsibility レジスタ名を、その命令が許す候補の中から解決します。
    def _resolve_register(self, kind: OperandKind, name: str):
        choices = {operand_name(choice).lower(): choice for choice in kind.operand_choices()}
        if name not in choices:
            allowed = [operand_name(choice) for choice in kind.operand_choices()]
            if kind.is_register_pair:
                raise InvalidRegisterPairError(name, allowed)
            raise InvalidRegisterError(name, allowed)
        return choices[name]
