# retro_8085/arch/i8085/instructions/base.py
"""
命令カタログの基本型

命令記述子 (InstructionDescriptor) と、そこから展開されるオペコード単位の
エントリ (CatalogEntry) を定義します。オペコードの計算式は opcode_for() の1箇所にあり、
アセンブラ (ニーモニック→オペコード) と CPU (オペコード→動作) の両方がこれを使います。
"""
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence, Tuple

from retro_8085.arch.i8085.state import MEMORY_OFFSET, Register, RegisterPair

if TYPE_CHECKING:
    from retro_8085.arch.i8085.cpu import I8085Cpu

# action(cpu, operand)。operand の型はオペランド種別によって決まります。
Action = Callable[["I8085Cpu", Any], None]


# @intent:responsibility 命令が取るオペランドの種類を定義します。
class OperandKind(Enum):
    NONE = "none"
    DATA8 = "data8"
    DATA16 = "data16"
    LABEL_ADDRESS16 = "label_address16"
    REGISTER = "register"
    REGISTER_OR_MEMORY = "register_or_memory"
    REGISTER_PAIR_OR_SP = "register_pair_or_sp"
    REGISTER_PAIR_OR_PSW = "register_pair_or_psw"
    REGISTER_PAIR_BD = "register_pair_bd"
    INDEX3 = "index3"

    @property
    def operand_count(self) -> int:
        return 0 if self is OperandKind.NONE else 1

    # @intent:responsibility オペコードに続くオペランドバイト数を返します。
    @property
    def extra_bytes(self) -> int:
        if self is OperandKind.DATA8:
            return 1
        if self in (OperandKind.DATA16, OperandKind.LABEL_ADDRESS16):
            return 2
        return 0

    @property
    def is_register_pair(self) -> bool:
        return self in (
            OperandKind.REGISTER_PAIR_OR_SP,
            OperandKind.REGISTER_PAIR_OR_PSW,
            OperandKind.REGISTER_PAIR_BD,
        )

    # @intent:responsibility オペコードに埋め込まれるオペランドの全候補を返します。
    # @intent:post-condition DATA8/DATA16/LABEL/NONE は候補を持たず (None,) を返します。
    def operand_choices(self) -> Sequence[Any]:
        if self is OperandKind.REGISTER:
            return tuple(Register)
        if self is OperandKind.REGISTER_OR_MEMORY:
            return tuple(Register) + (None,)
        if self is OperandKind.REGISTER_PAIR_BD:
            return (RegisterPair.B, RegisterPair.D)
        if self is OperandKind.REGISTER_PAIR_OR_SP:
            return (RegisterPair.B, RegisterPair.D, RegisterPair.H, RegisterPair.SP)
        if self is OperandKind.REGISTER_PAIR_OR_PSW:
            return (RegisterPair.B, RegisterPair.D, RegisterPair.H, RegisterPair.PSW)
        if self is OperandKind.INDEX3:
            return tuple(range(8))
        return (None,)


# @intent:responsibility オペコードに埋め込まれたオペランドの表記名を返します。None は M です。
def operand_name(operand: Any) -> str:
    if operand is None:
        return "M"
    if isinstance(operand, (Register, RegisterPair)):
        return operand.name
    return str(operand)


# @intent:responsibility 1つのニーモニックに対応する命令の宣言です。
@dataclass(frozen=True)
class InstructionDescriptor:
    """
    命令記述子。mnemonic は小文字・単一空白区切りで、"mov a" のように
    オペランドの一部を含む場合があります。
    code はオペランドが0のときのオペコード、spacing はレジスタ番号1つあたりの増分です。
    """
    mnemonic: str
    code: int
    operand_kind: OperandKind
    action: Action
    spacing: int = 1

    # @intent:responsibility 埋め込みオペランドに対するオペコードを計算します。
    def opcode_for(self, operand: Any = None) -> int:
        kind = self.operand_kind
        if kind in (OperandKind.REGISTER, OperandKind.REGISTER_OR_MEMORY):
            offset = MEMORY_OFFSET if operand is None else operand.offset
            return self.code + offset * self.spacing
        if kind.is_register_pair:
            return self.code + operand.offset
        if kind is OperandKind.INDEX3:
            return self.code + 8 * operand
        return self.code

    @property
    def length(self) -> int:
        return 1 + self.operand_kind.extra_bytes

    def expand(self) -> List["CatalogEntry"]:
        return [
            CatalogEntry(opcode=self.opcode_for(operand), descriptor=self, operand=operand)
            for operand in self.operand_kind.operand_choices()
        ]


# @intent:responsibility 単一オペコードの実行情報です。
@dataclass(frozen=True)
class CatalogEntry:
    """
    オペコード1つ分のカタログエントリ。operand はオペコードに埋め込まれたオペランド
    (Register / None(M) / RegisterPair / RST番号) で、即値系の命令では None です。
    """
    opcode: int
    descriptor: InstructionDescriptor
    operand: Any = None

    # @intent:responsibility 実行時に action へ渡すオペランドを決定します。
    def resolve_operand(self, operand_bytes: Sequence[int]) -> Any:
        kind = self.descriptor.operand_kind
        if kind is OperandKind.NONE:
            return None
        if kind is OperandKind.DATA8:
            return operand_bytes[0]
        if kind in (OperandKind.DATA16, OperandKind.LABEL_ADDRESS16):
            return operand_bytes[0] | (operand_bytes[1] << 8)
        return self.operand

    def execute(self, cpu: "I8085Cpu", operand_bytes: Sequence[int]) -> None:
        self.descriptor.action(cpu, self.resolve_operand(operand_bytes))


# @intent:responsibility 記述子の表からニーモニック索引とオペコード索引を構築します。
# @intent:pre-condition ニーモニックとオペコードは表全体で一意である必要があります。
def build_catalog(
    descriptors: Sequence[InstructionDescriptor],
) -> Tuple[Dict[str, InstructionDescriptor], Dict[int, CatalogEntry]]:
    mnemonic_map: Dict[str, InstructionDescriptor] = {}
    opcode_map: Dict[int, CatalogEntry] = {}
    for descriptor in descriptors:
        if descriptor.mnemonic in mnemonic_map:
            raise ValueError(f"Duplicate mnemonic '{descriptor.mnemonic}' in instruction table.")
        mnemonic_map[descriptor.mnemonic] = descriptor
        for entry in descriptor.expand():
            if entry.opcode in opcode_map:
                raise ValueError(
                    f"Opcode 0x{entry.opcode:02X} of '{descriptor.mnemonic}' collides with "
                    f"'{opcode_map[entry.opcode].descriptor.mnemonic}'."
                )
            opcode_map[entry.opcode] = entry
    return mnemonic_map, opcode_map


# ---------------------------------------------------------------------------
# オペランドアクセスの共通処理
# ---------------------------------------------------------------------------

# @intent:responsibility レジスタまたは M (H:L が指すメモリ) の値を読み出します。
def get_operand_value(cpu: "I8085Cpu", register: Optional[Register]) -> int:
    if register is None:
        return cpu.read_memory(cpu.get_pair(RegisterPair.H))
    return cpu.get_register(register)


def set_operand_value(cpu: "I8085Cpu", register: Optional[Register], value: int) -> None:
    if register is None:
        cpu.write_memory(cpu.get_pair(RegisterPair.H), value)
    else:
        cpu.set_register(register, value)
