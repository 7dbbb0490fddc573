import yaml
from typing import Any, Dict, List

from retro_8085.common.errors import ConfigError
from retro_8085.loader.literals import HEX_SUFFIX, parse_int as parse_literal
from .models import CpuInitialState, DEFAULT_MEMORY_SIZE, MemoryPreload, ProgramConfig, SystemConfig


# @intent:responsibility YAML のシステム構成を読み込み、SystemConfig に変換します。
class ConfigLoader:
    def load_from_file(self, path: str) -> SystemConfig:
        with open(path, 'r', encoding="utf-8") as f:
            text = f.read()
        return self.load_from_string(text)

    def load_from_string(self, text: str) -> SystemConfig:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}") from e
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("Top level of the configuration must be a mapping.")
        return self._parse_config(data)

    def _parse_config(self, data: Dict[str, Any]) -> SystemConfig:
        memory_size = self._parse_int(data.get("memory_size", DEFAULT_MEMORY_SIZE), "memory_size")

        program = None
        program_data = data.get("program")
        if program_data is not None:
            if not isinstance(program_data, dict):
                raise ConfigError("must be a mapping", key="program")
            if not program_data.get("source") and not program_data.get("path"):
                raise ConfigError("either 'source' or 'path' is required", key="program")
            program = ProgramConfig(
                source=program_data.get("source"),
                path=program_data.get("path"),
                load_address=self._parse_int(program_data.get("load_address", 0), "program.load_address"),
            )

        memory = []
        for index, region_data in enumerate(data.get("memory", [])):
            key = f"memory[{index}]"
            if not isinstance(region_data, dict):
                raise ConfigError("must be a mapping", key=key)
            memory.append(MemoryPreload(
                address=self._parse_int(region_data.get("address"), f"{key}.address"),
                data=self._parse_bytes(region_data.get("data", []), f"{key}.data"),
            ))

        state_data = data.get("initial_state", {}) or {}
        initial_state = CpuInitialState(
            pc=self._parse_int(state_data.get("pc", 0), "initial_state.pc"),
            sp=self._parse_int(state_data.get("sp", 0), "initial_state.sp"),
            interrupt_mask=self._parse_int(state_data.get("interrupt_mask", 0), "initial_state.interrupt_mask"),
            registers={
                str(name): self._parse_int(value, f"initial_state.registers.{name}")
                for name, value in (state_data.get("registers") or {}).items()
            },
            flags={str(name): bool(value) for name, value in (state_data.get("flags") or {}).items()},
        )

        return SystemConfig(
            memory_size=memory_size,
            program=program,
            memory=memory,
            initial_state=initial_state,
        )

    def _parse_bytes(self, values: Any, key: str) -> List[int]:
        if not isinstance(values, list):
            raise ConfigError("must be a list of bytes", key=key)
        result = []
        for value in values:
            byte = self._parse_int(value, key)
            if not 0 <= byte <= 0xFF:
                raise ConfigError(f"{value!r} is not an 8-bit value", key=key)
            result.append(byte)
        return result

    # @intent:utility_function YAML の整数、"0x.." 形式、"..h" 形式、10進文字列を整数に変換します。
    # @intent:rationale "..h" 表記はアセンブリソースと同じ規則 (1〜4桁) で解釈する。
    def _parse_int(self, value: Any, key: str) -> int:
        if isinstance(value, bool):
            raise ConfigError(f"Invalid integer format: {value!r}", key=key)
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            text = value.strip().lower()
            try:
                if text.startswith("0x"):
                    return int(text, 16)
                if text.endswith(HEX_SUFFIX):
                    return parse_literal(text)
                return int(text)
            except ValueError as e:
                raise ConfigError(f"Invalid integer format: {value!r}", key=key) from e
        raise ConfigError(f"Invalid integer format: {value!r}", key=key)
