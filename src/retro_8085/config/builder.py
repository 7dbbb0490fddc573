import logging
from typing import Optional, Tuple

from retro_8085.arch.i8085.cpu import I8085Cpu
from retro_8085.arch.i8085.state import Flag, Register
from retro_8085.common.errors import ConfigError
from retro_8085.loader.assembler import AssemblyResult
from retro_8085.loader.loader import AssemblyLoader
from .models import CpuInitialState, SystemConfig

logger = logging.getLogger(__name__)


# @intent:responsibility システム構成に基づいて CPU を生成し、プログラムとデータを配置して初期状態を適用します。
class SystemBuilder:
    def __init__(self, loader: Optional[AssemblyLoader] = None):
        self._loader = loader if loader is not None else AssemblyLoader()

    def build_system(self, config: SystemConfig) -> Tuple[I8085Cpu, Optional[AssemblyResult]]:
        try:
            cpu = I8085Cpu(config.memory_size)
        except ValueError as e:
            raise ConfigError(str(e), key="memory_size") from e

        result = None
        program = config.program
        if program is not None:
            if program.source:
                result = self._loader.load_source(program.source, cpu, program.load_address)
            elif program.path:
                result = self._loader.load_assembly(program.path, cpu, program.load_address)
            else:
                raise ConfigError("either 'source' or 'path' is required", key="program")
            cpu.set_symbol_map(result.symbols)

        for preload in config.memory:
            cpu.set_memory(preload.address, preload.data)

        self.apply_initial_state(cpu, config.initial_state)

        logger.info(
            "Built 8085 system: memory %d bytes, program %d bytes, %d preload region(s), PC=%04Xh",
            cpu.memory_size,
            len(result.data) if result else 0,
            len(config.memory),
            cpu.pc,
        )
        return cpu, result

    # @intent:responsibility 構成で指定された初期値を CPU に適用します。
    # @intent:rationale 未知のレジスタ名・フラグ名は無視し、警告のみ出力します。
    def apply_initial_state(self, cpu: I8085Cpu, config_state: CpuInitialState) -> None:
        """
        CPUをリセットしてから、PC、SP、割り込みマスク、レジスタ、フラグを設定します。
        """
        cpu.reset()
        cpu.pc = config_state.pc
        cpu.sp = config_state.sp
        cpu.interrupt_mask = config_state.interrupt_mask

        for reg_name, value in config_state.registers.items():
            try:
                register = Register[reg_name.upper()]
            except KeyError:
                logger.warning("Unknown register '%s' in initial_state, ignored", reg_name)
                continue
            cpu.set_register(register, value)

        for flag_name, value in config_state.flags.items():
            try:
                flag = Flag[flag_name.upper()]
            except KeyError:
                logger.warning("Unknown flag '%s' in initial_state, ignored", flag_name)
                continue
            cpu.set_flag(flag, value)
