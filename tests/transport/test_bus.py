# tests/transport/test_bus.py
"""
retro_8085.transport.bus モジュールの単体テスト。
"""
import pytest

from retro_8085.transport.bus import Bus, BusAccess, BusAccessType, RAM

# @intent:test_suite 共通バスとRAMデバイスの検証。


class TestRAM:
    def test_ram_init(self):
        ram = RAM(16)
        assert ram.get_size() == 16
        assert all(ram.read(i) == 0 for i in range(16))

    @pytest.mark.parametrize("size", [0, -1, "16"])
    def test_ram_invalid_size(self, size):
        with pytest.raises(ValueError, match="must be positive"):
            RAM(size)

    def test_ram_read_write(self):
        ram = RAM(4)
        ram.write(3, 0xAB)
        assert ram.read(3) == 0xAB

    # @intent:test_case_out_of_bounds 範囲外アクセスが IndexError になることを検証します。
    def test_ram_out_of_bounds(self):
        ram = RAM(4)
        with pytest.raises(IndexError, match="RAM offset 0x0004 is outside"):
            ram.read(4)
        with pytest.raises(IndexError):
            ram.write(-1, 0)

    def test_ram_write_non_byte(self):
        ram = RAM(4)
        with pytest.raises(ValueError, match="does not fit in a byte"):
            ram.write(0, 0x100)


class TestBus:
    @pytest.fixture
    def setup_bus(self):
        bus = Bus()
        ram = RAM(0x100)
        bus.register_device(0x1000, 0x10FF, ram)
        return bus, ram

    def test_register_device_size_mismatch(self):
        bus = Bus()
        with pytest.raises(ValueError, match="but the range"):
            bus.register_device(0x0000, 0x00FF, RAM(0x80))

    def test_register_device_invalid_range(self):
        bus = Bus()
        with pytest.raises(ValueError, match="Invalid range"):
            bus.register_device(0x0010, 0x000F, RAM(1))

    def test_register_non_device(self):
        bus = Bus()
        with pytest.raises(TypeError):
            bus.register_device(0x0000, 0x0000, object())

    # @intent:test_case_dispatch デバイス先頭からのオフセットでアクセスされることを検証します。
    def test_read_write_dispatch(self, setup_bus):
        bus, ram = setup_bus
        bus.write(0x1010, 0x42)
        assert ram.read(0x10) == 0x42
        assert bus.read(0x1010) == 0x42

    def test_unmapped_address(self, setup_bus):
        bus, _ = setup_bus
        with pytest.raises(IndexError, match="No device mapped"):
            bus.read(0x2000)

    def test_activity_log(self, setup_bus):
        bus, _ = setup_bus
        bus.write(0x1000, 0x01)
        bus.read(0x1000)

        log = bus.get_and_clear_activity_log()
        assert log == [
            BusAccess(0x1000, 0x01, BusAccessType.WRITE),
            BusAccess(0x1000, 0x01, BusAccessType.READ),
        ]
        assert bus.get_and_clear_activity_log() == []

    def test_peek_and_load_are_not_logged(self, setup_bus):
        bus, ram = setup_bus
        bus.load(0x1001, 0x99)
        assert bus.peek(0x1001) == 0x99
        assert ram.read(0x01) == 0x99
        assert bus.get_and_clear_activity_log() == []

    # @intent:test_case_io I/O 空間は未接続で、IN は0を返し、アクセスは記録されることを検証します。
    def test_io_access(self, setup_bus):
        bus, _ = setup_bus
        assert bus.read_io(0x20) == 0
        bus.write_io(0x21, 0x5A)
        assert bus.get_and_clear_activity_log() == [
            BusAccess(0x20, 0x00, BusAccessType.IO_READ),
            BusAccess(0x21, 0x5A, BusAccessType.IO_WRITE),
        ]
