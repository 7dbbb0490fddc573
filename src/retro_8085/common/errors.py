# retro_8085/common/errors.py
"""
例外階層

アセンブラとエミュレータが送出する例外を定義します。
全ての例外は Retro8085Error を基底とし、アセンブル時の入力エラーは ValueError、
実行時のエラーは RuntimeError としても捕捉できます。
"""
from typing import Optional, Sequence


# @intent:responsibility パッケージ全体の例外の基底クラスです。
class Retro8085Error(Exception):
    """retro_8085 が送出する全ての例外の基底クラス。"""


# ---------------------------------------------------------------------------
# アセンブラ
# ---------------------------------------------------------------------------

# @intent:responsibility 1行のソースを処理する途中で検出される入力エラーの基底クラスです。
class AssemblerError(Retro8085Error, ValueError):
    """
    ソースの1行を解釈・エンコードする過程で発生したエラー。
    行番号は持たず、AssemblyError に包まれて呼び出し元へ伝わります。
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnknownMnemonicError(AssemblerError):
    def __init__(self, mnemonic: str):
        self.mnemonic = mnemonic
        super().__init__(f"Unknown opcode '{mnemonic}'")


class OperandCountError(AssemblerError):
    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected} operand(s), found {actual}")


class InvalidRegisterError(AssemblerError):
    def __init__(self, name: str, allowed: Sequence[str]):
        self.name = name
        self.allowed = tuple(allowed)
        super().__init__(f"Expected register {'/'.join(self.allowed)}, found '{name}'")


class InvalidRegisterPairError(AssemblerError):
    def __init__(self, name: str, allowed: Sequence[str]):
        self.name = name
        self.allowed = tuple(allowed)
        super().__init__(f"Expected register pair {'/'.join(self.allowed)}, found '{name}'")


class MalformedLiteralError(AssemblerError):
    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Malformed numeric literal '{text}'")


class IndexOutOfRangeError(AssemblerError):
    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Expected an index from 0 to 7, found '{text}'")


class EmptyLabelError(AssemblerError):
    def __init__(self):
        super().__init__("Label name is empty")


class DuplicateLabelError(AssemblerError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Label '{name}' is already defined")


class UndefinedLabelError(AssemblerError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Label '{name}' is not defined")


# @intent:responsibility 行番号付きでアセンブル失敗を報告します。
class AssemblyError(Retro8085Error, ValueError):
    """
    compile() が送出する唯一の例外。
    line_number は0始まりの行番号、cause は元になった AssemblerError です。
    """

    def __init__(self, line_number: int, cause: AssemblerError):
        self.line_number = line_number
        self.cause = cause
        super().__init__(f"Error at line {line_number}: {cause.message}")


# ---------------------------------------------------------------------------
# エミュレータ
# ---------------------------------------------------------------------------

class EmulatorError(Retro8085Error, RuntimeError):
    """命令実行中に発生したエラーの基底クラス。"""


# @intent:responsibility カタログに存在しないオペコードをフェッチしたことを報告します。
class UnknownOpcodeError(EmulatorError):
    def __init__(self, opcode: int, address: int):
        self.opcode = opcode
        self.address = address
        super().__init__(f"Unknown opcode 0x{opcode:02X} at address 0x{address:04X}")


# @intent:responsibility 命令実行中にメモリ範囲外のアドレスへアクセスしたことを報告します。
class MemoryAccessError(EmulatorError):
    """
    address はアクセス先、access は "read" か "write" です。
    オペランドバイトのフェッチがメモリ末尾を越えた場合もこの例外になります。
    """

    def __init__(self, address: int, access: str):
        self.address = address
        self.access = access
        super().__init__(f"Memory {access} at address 0x{address:04X} is outside the installed memory")


# ---------------------------------------------------------------------------
# 設定
# ---------------------------------------------------------------------------

class ConfigError(Retro8085Error, ValueError):
    """システム設定ファイルの内容が不正な場合に送出されます。"""

    def __init__(self, message: str, key: Optional[str] = None):
        self.key = key
        if key:
            message = f"{key}: {message}"
        super().__init__(message)
