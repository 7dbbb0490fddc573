# tests/arch/i8085/test_i8085_programs.py
"""
アセンブルから実行までを通したプログラム単位の結合テスト。
"""
from retro_8085.arch.i8085.assembler import I8085Assembler
from retro_8085.arch.i8085.cpu import I8085Cpu
from retro_8085.arch.i8085.state import Flag, Register
from retro_8085.core.events import CpuEvent
from retro_8085.loader.loader import AssemblyLoader

# @intent:test_suite 実プログラムのステップ実行と run() の結果を検証します。

ADD_TWO_NUMBERS = """\
LXI H, 3005h ; operands at 3005h, 3006h
MOV A, M
INX H
ADD M
INX H
MOV M, A     ; result at 3007h
HLT
"""

EXCHANGE = """\
LDA 5000h
MOV B,A
LDA 6000h
STA 5000h
MOV A,B
STA 6000h
HLT
"""

SORT = """\
MVI B, 09
START:
LXI H, 3000H
MVI C, 09H
BACK:
MOV A, M
INX H
CMP M
JC SKIP
JZ SKIP
MOV D, M
MOV M, A
DCX H
MOV M, D
INX H
SKIP:
DCR C
JNZ BACK
DCR B
JNZ START
HLT
"""


class TestAddTwoNumbers:
    # @intent:test_case_step_by_step 各ステップ後のレジスタ・フラグ・メモリの状態を検証します。
    def test_step_by_step(self):
        cpu = I8085Cpu()
        result = I8085Assembler().compile(ADD_TWO_NUMBERS)
        cpu.set_memory(0x0400, result.data)
        cpu.set_memory(0x3005, 0x14, 0x89)
        cpu.pc = 0x0400
        halted = []
        cpu.subscribe(CpuEvent.HALTED, lambda: halted.append(cpu.pc))

        cpu.step()
        assert cpu.pc == 0x0403
        assert cpu.get_register(Register.H) == 0x30
        assert cpu.get_register(Register.L) == 0x05

        cpu.step()
        assert cpu.pc == 0x0404
        assert cpu.get_register(Register.A) == 0x14
        assert not cpu.get_flag(Flag.P)

        cpu.step()
        assert cpu.pc == 0x0405
        assert cpu.get_register(Register.L) == 0x06

        cpu.step()
        assert cpu.pc == 0x0406
        assert cpu.get_register(Register.A) == 0x9D
        # 10011101b は1のビットが5個 (奇数)
        assert not cpu.get_flag(Flag.P)
        assert cpu.get_flag(Flag.S)
        assert not cpu.get_flag(Flag.C)

        cpu.step()
        assert cpu.pc == 0x0407
        assert cpu.get_register(Register.L) == 0x07

        snapshot = cpu.step()
        assert cpu.pc == 0x0408
        assert cpu.get_memory(0x3007) == b"\x9d"
        assert snapshot.operation.text == "MOV M, A"

        assert halted == []
        cpu.step()
        assert cpu.pc == 0x0409
        assert halted == [0x0409]


class TestExchange:
    # @intent:test_case_assemble_and_run ソースから生成したバイト列を確認し、実行で2つの値が入れ替わることを検証します。
    def test_assemble_and_swap_memory(self):
        result = I8085Assembler().compile(EXCHANGE)
        assert result.data == bytes([
            0x3A, 0x00, 0x50,
            0x47,
            0x3A, 0x00, 0x60,
            0x32, 0x00, 0x50,
            0x78,
            0x32, 0x00, 0x60,
            0x76,
        ])

        cpu = I8085Cpu()
        cpu.set_memory(0x0000, result.data)
        cpu.set_memory(0x5000, 0x22)
        cpu.set_memory(0x6000, 0x44)
        cpu.run()
        assert cpu.get_memory(0x5000) == b"\x44"
        assert cpu.get_memory(0x6000) == b"\x22"
        assert cpu.pc == 0x000E


class TestSort:
    # @intent:test_case_bubble_sort 10バイトのバブルソートが昇順に並べ替えることを検証します。
    def test_sort_ten_bytes(self):
        cpu = I8085Cpu()
        AssemblyLoader().load_source(SORT, cpu, 0x0000)
        data = [0x12, 0x01, 0x05, 0xAD, 0x03, 0x56, 0x1A, 0xD2, 0x00, 0x44]
        cpu.set_memory(0x3000, data)
        cpu.run()
        assert cpu.get_memory(0x3000, 10) == bytes(sorted(data))
        assert cpu.get_register(Register.B) == 0
