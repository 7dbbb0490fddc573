# retro_8085/loader/loader.py
"""
Loader (コードローダー)

アセンブリソースをアセンブルし、生成した機械語を CPU のメモリへ配置します。
"""
import logging
from typing import Optional

from retro_8085.arch.i8085.assembler import I8085Assembler
from retro_8085.arch.i8085.cpu import I8085Cpu
from retro_8085.loader.assembler import AssemblyResult, BaseAssembler

logger = logging.getLogger(__name__)


# @intent:responsibility アセンブリソースを機械語に変換し、指定アドレスへロードします。
class AssemblyLoader:
    """
    ソースを address を origin としてアセンブルし、address から配置するローダー。
    ラベルの絶対アドレスは AssemblyResult.symbols で得られます。
    """

    def __init__(self, assembler: Optional[BaseAssembler] = None):
        self._assembler = assembler if assembler is not None else I8085Assembler()

    def load_source(self, source: str, cpu: I8085Cpu, address: int = 0) -> AssemblyResult:
        result = self._assembler.compile(source, origin=address)
        cpu.set_memory(address, result.data)
        logger.debug("Loaded %d bytes at %04Xh", len(result.data), address)
        return result

    # @intent:pre-condition file_path は UTF-8 のテキストファイルである必要があります。
    def load_assembly(self, file_path: str, cpu: I8085Cpu, address: int = 0) -> AssemblyResult:
        with open(file_path, 'r', encoding="utf-8") as f:
            source = f.read()
        return self.load_source(source, cpu, address)
