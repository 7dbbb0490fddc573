"""
8085逆アセンブラモジュール。

メモリ上のバイト列を命令表のオペコード索引で解析し、アセンブラへ再入力できる形式の
テキストに変換します。
"""
from typing import List, Tuple

from retro_8085.arch.i8085.instructions import decode_opcode, lookup_opcode
from retro_8085.transport.bus import Bus


# @intent:responsibility 指定範囲を逆アセンブルし、(アドレス, 16進ダンプ, 命令テキスト) のリストを返します。
def disassemble(bus: Bus, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    未知のバイトは "DB xxh"、メモリ範囲外は ("??", "ERR") として1バイトずつ進みます。
    命令が範囲の末尾をまたぐ場合も、その命令全体を出力します。
    """
    result = []
    current_addr = start_addr
    end_addr = start_addr + length

    while current_addr < end_addr and current_addr <= 0xFFFF:
        try:
            # ログを汚さないためにpeekを使用
            opcode = bus.peek(current_addr)
            entry = lookup_opcode(opcode)
            if entry is None:
                result.append((current_addr, f"{opcode:02X}", f"DB {opcode:02X}h"))
                current_addr += 1
                continue

            operand_bytes = [bus.peek(current_addr + 1 + i) for i in range(entry.descriptor.operand_kind.extra_bytes)]
            operation = decode_opcode(opcode, operand_bytes)
            hex_dump = " ".join(f"{b:02X}" for b in [opcode] + operand_bytes)
            result.append((current_addr, hex_dump, operation.text))
            current_addr += operation.length

        except IndexError:
            result.append((current_addr, "??", "ERR"))
            current_addr += 1

    return result
