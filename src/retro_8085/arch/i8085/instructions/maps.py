# retro_8085/arch/i8085/instructions/maps.py
"""
Intel 8085 命令表

全命令の記述子を宣言的に並べた表と、そこから構築する2つの索引
(MNEMONIC_MAP: ニーモニック→記述子、OPCODE_MAP: オペコード→エントリ) を提供します。
"""
import logging
from typing import Dict, Tuple

from retro_8085.arch.i8085.instructions import alu, control, load
from retro_8085.arch.i8085.instructions.base import (
    CatalogEntry,
    InstructionDescriptor,
    OperandKind,
    build_catalog,
)
from retro_8085.arch.i8085.state import Flag, Register, RegisterPair

logger = logging.getLogger(__name__)

K = OperandKind
D = InstructionDescriptor

_NZ = control.flag_clear(Flag.Z)
_Z = control.flag_set(Flag.Z)
_NC = control.flag_clear(Flag.C)
_C = control.flag_set(Flag.C)
_PO = control.flag_clear(Flag.P)
_PE = control.flag_set(Flag.P)
_P = control.flag_clear(Flag.S)
_M = control.flag_set(Flag.S)

# @intent:data_structure 命令表。オペコードはこの表からのみ導出されます。
INSTRUCTION_SET: Tuple[InstructionDescriptor, ...] = (
    # データ転送
    D("mov a", 0x78, K.REGISTER_OR_MEMORY, load.mov_to(Register.A)),
    D("mov b", 0x40, K.REGISTER_OR_MEMORY, load.mov_to(Register.B)),
    D("mov c", 0x48, K.REGISTER_OR_MEMORY, load.mov_to(Register.C)),
    D("mov d", 0x50, K.REGISTER_OR_MEMORY, load.mov_to(Register.D)),
    D("mov e", 0x58, K.REGISTER_OR_MEMORY, load.mov_to(Register.E)),
    D("mov h", 0x60, K.REGISTER_OR_MEMORY, load.mov_to(Register.H)),
    D("mov l", 0x68, K.REGISTER_OR_MEMORY, load.mov_to(Register.L)),
    D("mov m", 0x70, K.REGISTER, load.mov_to(None)),
    D("mvi a", 0x3E, K.DATA8, load.mvi_to(Register.A)),
    D("mvi b", 0x06, K.DATA8, load.mvi_to(Register.B)),
    D("mvi c", 0x0E, K.DATA8, load.mvi_to(Register.C)),
    D("mvi d", 0x16, K.DATA8, load.mvi_to(Register.D)),
    D("mvi e", 0x1E, K.DATA8, load.mvi_to(Register.E)),
    D("mvi h", 0x26, K.DATA8, load.mvi_to(Register.H)),
    D("mvi l", 0x2E, K.DATA8, load.mvi_to(Register.L)),
    D("mvi m", 0x36, K.DATA8, load.mvi_to(None)),
    D("lxi b", 0x01, K.DATA16, load.lxi_to(RegisterPair.B)),
    D("lxi d", 0x11, K.DATA16, load.lxi_to(RegisterPair.D)),
    D("lxi h", 0x21, K.DATA16, load.lxi_to(RegisterPair.H)),
    D("lxi sp", 0x31, K.DATA16, load.lxi_to(RegisterPair.SP)),
    D("lda", 0x3A, K.DATA16, load.lda),
    D("sta", 0x32, K.DATA16, load.sta),
    D("lhld", 0x2A, K.DATA16, load.lhld),
    D("shld", 0x22, K.DATA16, load.shld),
    D("ldax", 0x0A, K.REGISTER_PAIR_BD, load.ldax),
    D("stax", 0x02, K.REGISTER_PAIR_BD, load.stax),
    D("xchg", 0xEB, K.NONE, load.xchg),

    # スタック
    D("push", 0xC5, K.REGISTER_PAIR_OR_PSW, load.push),
    D("pop", 0xC1, K.REGISTER_PAIR_OR_PSW, load.pop),
    D("xthl", 0xE3, K.NONE, load.xthl),
    D("sphl", 0xF9, K.NONE, load.sphl),

    # 算術
    D("add", 0x80, K.REGISTER_OR_MEMORY, alu.add),
    D("adc", 0x88, K.REGISTER_OR_MEMORY, alu.adc),
    D("sub", 0x90, K.REGISTER_OR_MEMORY, alu.sub),
    D("sbb", 0x98, K.REGISTER_OR_MEMORY, alu.sbb),
    D("adi", 0xC6, K.DATA8, alu.adi),
    D("aci", 0xCE, K.DATA8, alu.aci),
    D("sui", 0xD6, K.DATA8, alu.sui),
    D("sbi", 0xDE, K.DATA8, alu.sbi),
    D("inr", 0x04, K.REGISTER_OR_MEMORY, alu.inr, spacing=8),
    D("dcr", 0x05, K.REGISTER_OR_MEMORY, alu.dcr, spacing=8),
    D("inx", 0x03, K.REGISTER_PAIR_OR_SP, alu.inx),
    D("dcx", 0x0B, K.REGISTER_PAIR_OR_SP, alu.dcx),
    D("dad", 0x09, K.REGISTER_PAIR_OR_SP, alu.dad),
    D("daa", 0x27, K.NONE, alu.daa),

    # 論理
    D("ana", 0xA0, K.REGISTER_OR_MEMORY, alu.ana),
    D("xra", 0xA8, K.REGISTER_OR_MEMORY, alu.xra),
    D("ora", 0xB0, K.REGISTER_OR_MEMORY, alu.ora),
    D("cmp", 0xB8, K.REGISTER_OR_MEMORY, alu.cmp),
    D("ani", 0xE6, K.DATA8, alu.ani),
    D("xri", 0xEE, K.DATA8, alu.xri),
    D("ori", 0xF6, K.DATA8, alu.ori),
    D("cpi", 0xFE, K.DATA8, alu.cpi),
    D("cma", 0x2F, K.NONE, alu.cma),
    D("cmc", 0x3F, K.NONE, alu.cmc),
    D("stc", 0x37, K.NONE, alu.stc),
    D("rlc", 0x07, K.NONE, alu.rlc),
    D("rrc", 0x0F, K.NONE, alu.rrc),
    D("ral", 0x17, K.NONE, alu.ral),
    D("rar", 0x1F, K.NONE, alu.rar),

    # 分岐
    D("jmp", 0xC3, K.LABEL_ADDRESS16, control.jump_if(control.always)),
    D("jnz", 0xC2, K.LABEL_ADDRESS16, control.jump_if(_NZ)),
    D("jz", 0xCA, K.LABEL_ADDRESS16, control.jump_if(_Z)),
    D("jnc", 0xD2, K.LABEL_ADDRESS16, control.jump_if(_NC)),
    D("jc", 0xDA, K.LABEL_ADDRESS16, control.jump_if(_C)),
    D("jpo", 0xE2, K.LABEL_ADDRESS16, control.jump_if(_PO)),
    D("jpe", 0xEA, K.LABEL_ADDRESS16, control.jump_if(_PE)),
    D("jp", 0xF2, K.LABEL_ADDRESS16, control.jump_if(_P)),
    D("jm", 0xFA, K.LABEL_ADDRESS16, control.jump_if(_M)),
    D("pchl", 0xE9, K.NONE, control.pchl),

    # サブルーチン
    D("call", 0xCD, K.LABEL_ADDRESS16, control.call_if(control.always)),
    D("cnz", 0xC4, K.LABEL_ADDRESS16, control.call_if(_NZ)),
    D("cz", 0xCC, K.LABEL_ADDRESS16, control.call_if(_Z)),
    D("cnc", 0xD4, K.LABEL_ADDRESS16, control.call_if(_NC)),
    D("cc", 0xDC, K.LABEL_ADDRESS16, control.call_if(_C)),
    D("cpo", 0xE4, K.LABEL_ADDRESS16, control.call_if(_PO)),
    D("cpe", 0xEC, K.LABEL_ADDRESS16, control.call_if(_PE)),
    D("cp", 0xF4, K.LABEL_ADDRESS16, control.call_if(_P)),
    D("cm", 0xFC, K.LABEL_ADDRESS16, control.call_if(_M)),
    D("ret", 0xC9, K.NONE, control.return_if(control.always)),
    D("rnz", 0xC0, K.NONE, control.return_if(_NZ)),
    D("rz", 0xC8, K.NONE, control.return_if(_Z)),
    D("rnc", 0xD0, K.NONE, control.return_if(_NC)),
    D("rc", 0xD8, K.NONE, control.return_if(_C)),
    D("rpo", 0xE0, K.NONE, control.return_if(_PO)),
    D("rpe", 0xE8, K.NONE, control.return_if(_PE)),
    D("rp", 0xF0, K.NONE, control.return_if(_P)),
    D("rm", 0xF8, K.NONE, control.return_if(_M)),
    D("rst", 0xC7, K.INDEX3, control.rst),

    # 制御・I/O
    D("nop", 0x00, K.NONE, control.nop),
    D("hlt", 0x76, K.NONE, control.hlt),
    D("ei", 0xFB, K.NONE, control.ei),
    D("di", 0xF3, K.NONE, control.di),
    D("rim", 0x20, K.NONE, control.rim),
    D("sim", 0x30, K.NONE, control.sim),
    D("in", 0xDB, K.DATA8, control.in_port),
    D("out", 0xD3, K.DATA8, control.out_port),
)

MNEMONIC_MAP: Dict[str, InstructionDescriptor]
OPCODE_MAP: Dict[int, CatalogEntry]
MNEMONIC_MAP, OPCODE_MAP = build_catalog(INSTRUCTION_SET)

logger.debug("8085 catalog: %d mnemonics, %d opcodes", len(MNEMONIC_MAP), len(OPCODE_MAP))
