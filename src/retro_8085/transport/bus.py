# retro_8085/transport/bus.py
"""
Transport Layer (8085 バス)

8085 の64KBメモリ空間と256ポートのI/O空間を抽象化します。
CPU からのアクセスは全てここを通り、1命令分のアクセス履歴として記録されます。
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

logger = logging.getLogger(__name__)


# @intent:responsibility バスアクセスの種類を定義します。
class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"
    IO_READ = "IO_READ"
    IO_WRITE = "IO_WRITE"


# @intent:responsibility 個々のバスアクセスを記録します。
@dataclass(frozen=True)
class BusAccess:
    """
    バス上で行われた単一のアクセスを記録するデータクラス。
    """
    address: int
    data: int  # 8bit value
    access_type: BusAccessType


# @intent:responsibility バスに接続するデバイスのインターフェースを定義します。
class Device(ABC):
    """
    メモリ空間に配置されるデバイス。
    アドレスはデバイス先頭からのオフセットとして渡されます。
    """

    @abstractmethod
    def read(self, address: int) -> int:
        pass

    @abstractmethod
    def write(self, address: int, data: int) -> None:
        pass

    @abstractmethod
    def get_size(self) -> int:
        pass


# @intent:responsibility バイト列で実装されたRAMデバイスです。
class RAM(Device):
    """
    8085 の主記憶。電源投入時は全て0で初期化されます。
    """
    # @intent:pre-condition size は1以上の整数です。
    def __init__(self, size: int):
        if not isinstance(size, int) or size <= 0:
            raise ValueError(f"RAM size must be positive, got {size!r}.")
        self._memory = bytearray(size)
        self._size = size

    def read(self, address: int) -> int:
        if not 0 <= address < self._size:
            raise IndexError(f"RAM offset {address:#06x} is outside 0..{self._size - 1:#06x}.")
        return self._memory[address]

    def write(self, address: int, data: int) -> None:
        if not 0 <= address < self._size:
            raise IndexError(f"RAM offset {address:#06x} is outside 0..{self._size - 1:#06x}.")
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Value {data!r} does not fit in a byte.")
        self._memory[address] = data

    def get_size(self) -> int:
        return self._size


# @intent:responsibility アドレス空間を管理し、デバイスへのアクセスを振り分けます。
# @intent:rationale 全てのアクセスを記録し、Snapshot とデバッガのブレークポイント判定に渡します。
class Bus:
    """
    アドレスをデバイスとオフセットに振り分け、CPU からのアクセスを記録するバス。
    read/write/read_io/write_io は記録され、peek/load は記録されません。
    """

    def __init__(self):
        # (start_address, end_address, device)
        self._memory_map: List[Tuple[int, int, Device]] = []
        self._bus_activity_log: List[BusAccess] = []

    def _log_access(self, address: int, data: int, access_type: BusAccessType) -> None:
        self._bus_activity_log.append(BusAccess(address=address, data=data, access_type=access_type))

    # @intent:responsibility 記録されたアクセス履歴を返し、内部の履歴を空にします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        log = self._bus_activity_log
        self._bus_activity_log = []
        return log

    # @intent:responsibility 指定範囲にデバイスを登録します。
    # @intent:pre-condition 範囲の大きさはデバイスのサイズと一致する必要があります。重複は検査しません。
    def register_device(self, start_address: int, end_address: int, device: Device) -> None:
        if not (0 <= start_address <= end_address):
            raise ValueError(f"Invalid range {start_address:#06x}-{end_address:#06x}.")
        if not isinstance(device, Device):
            raise TypeError(f"{type(device).__name__} is not a Device.")

        expected_size = end_address - start_address + 1
        if device.get_size() != expected_size:
            raise ValueError(
                f"{type(device).__name__} holds {device.get_size()} bytes but the range "
                f"{start_address:#06x}-{end_address:#06x} covers {expected_size}."
            )
        self._memory_map.append((start_address, end_address, device))

    # @intent:post-condition 対応するデバイスがない場合はIndexErrorを発生させます。
    def _find_device(self, address: int) -> Tuple[Device, int]:
        for start, end, device in self._memory_map:
            if start <= address <= end:
                return device, address - start
        raise IndexError(f"No device mapped at {address:#06x}.")

    def read(self, address: int) -> int:
        """
        指定アドレスから8bitを読み出します。アクセスは記録されます。
        """
        device, offset = self._find_device(address)
        data = device.read(offset)
        self._log_access(address, data, BusAccessType.READ)
        return data

    def peek(self, address: int) -> int:
        """
        記録を残さずに読み出します。逆アセンブラや run() の停止判定で使用します。
        """
        device, offset = self._find_device(address)
        return device.read(offset)

    def write(self, address: int, data: int) -> None:
        """
        指定アドレスに8bitを書き込みます。アクセスは記録されます。
        """
        device, offset = self._find_device(address)
        device.write(offset, data)
        self._log_access(address, data, BusAccessType.WRITE)

    # @intent:responsibility プログラムやデータの事前配置用の書き込みです。
    def load(self, address: int, data: int) -> None:
        """
        記録を残さずに書き込みます。ローダーと CPU.set_memory() が使用します。
        """
        device, offset = self._find_device(address)
        device.write(offset, data)

    # @intent:responsibility I/Oポートからの入力。ポートにデバイスは接続されていません。
    def read_io(self, port: int) -> int:
        """
        指定ポートから8bitを読み出します。接続デバイスがないため常に0を返します。
        """
        data = 0x00
        logger.debug("IN from unconnected port %02Xh", port)
        self._log_access(port, data, BusAccessType.IO_READ)
        return data

    # @intent:responsibility I/Oポートへの出力。値は記録のみされます。
    def write_io(self, port: int, data: int) -> None:
        logger.debug("OUT %02Xh to unconnected port %02Xh", data, port)
        self._log_access(port, data, BusAccessType.IO_WRITE)
