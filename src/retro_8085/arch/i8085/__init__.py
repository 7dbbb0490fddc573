# src/retro_8085/arch/i8085/__init__.py
"""
Intel 8085 Architecture Package
"""
from .cpu import I8085Cpu
from .state import Flag, I8085CpuState, Register, RegisterPair
