from dataclasses import dataclass, field
from typing import Dict, List, Optional

DEFAULT_MEMORY_SIZE = 0x10000


@dataclass
class ProgramConfig:
    source: Optional[str] = None  # インラインのアセンブリソース
    path: Optional[str] = None  # アセンブリソースファイル
    load_address: int = 0x0000


@dataclass
class MemoryPreload:
    address: int
    data: List[int] = field(default_factory=list)


@dataclass
class CpuInitialState:
    pc: int = 0x0000
    sp: int = 0x0000
    interrupt_mask: int = 0x00
    registers: Dict[str, int] = field(default_factory=dict)  # 例: {"A": 0x10}
    flags: Dict[str, bool] = field(default_factory=dict)  # 例: {"C": True}


@dataclass
class SystemConfig:
    memory_size: int = DEFAULT_MEMORY_SIZE
    program: Optional[ProgramConfig] = None
    memory: List[MemoryPreload] = field(default_factory=list)
    initial_state: CpuInitialState = field(default_factory=CpuInitialState)
