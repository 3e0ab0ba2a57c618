"""Tests for the render targets and the shared blit helper."""
import sys
import threading
import types
from unittest.mock import MagicMock

import pytest
from PIL import Image

from hw import RenderTarget, SimulatedTarget, Ssd1306Target
from hw.oled import bus_number
from hw.target import Point, Rect, blit


# =============================================================================
# Rect / blit
# =============================================================================

def test_rect_geometry():
    r = Rect(2, 3, 10, 7)
    assert (r.width, r.height, r.size) == (8, 4, (8, 4))
    assert r.origin == Point(2, 3)
    assert Rect.of_size(128, 64) == Rect(0, 0, 128, 64)


def test_rect_intersect():
    assert Rect(0, 0, 10, 10).intersect(Rect(5, 5, 20, 20)) == Rect(5, 5, 10, 10)
    assert Rect(0, 0, 10, 10).intersect(Rect(20, 20, 30, 30)).is_empty()


def test_blit_full_frame():
    dest = Image.new("1", (8, 8), 0)
    blit(dest, Rect.of_size(8, 8), Image.new("1", (8, 8), 255))
    assert dest.getbbox() == (0, 0, 8, 8)


def test_blit_with_offset_and_region():
    frame = Image.new("1", (8, 8), 0)
    frame.putpixel((3, 3), 255)
    dest = Image.new("1", (8, 8), 0)
    # region starts at (1, 1) and samples the frame from (2, 2)
    blit(dest, Rect(1, 1, 8, 8), frame, Point(2, 2))
    assert dest.getbbox() == (2, 2, 3, 3)


def test_blit_leaves_unsampled_pixels():
    dest = Image.new("1", (8, 8), 255)
    blit(dest, Rect.of_size(8, 8), Image.new("1", (4, 4), 0))
    assert dest.getpixel((0, 0)) == 0
    assert dest.getpixel((7, 7)) == 255


def test_blit_region_outside_dest_is_ignored():
    dest = Image.new("1", (8, 8), 0)
    blit(dest, Rect(20, 20, 30, 30), Image.new("1", (8, 8), 255))
    assert dest.getbbox() is None


# =============================================================================
# SimulatedTarget
# =============================================================================

def test_simulator_satisfies_protocol():
    assert isinstance(SimulatedTarget(), RenderTarget)
    assert isinstance(Ssd1306Target(), RenderTarget)


def test_simulator_starts_dark():
    sim = SimulatedTarget()
    sim.open()
    assert sim.bounds() == Rect(0, 0, 128, 64)
    assert sim.frame().getbbox() is None


def test_simulator_draw_before_open():
    with pytest.raises(RuntimeError):
        SimulatedTarget().draw(Rect(0, 0, 128, 64), Image.new("1", (128, 64)), Point())


def test_simulator_reflects_last_draw():
    sim = SimulatedTarget((16, 8))
    sim.open()
    frame = Image.new("1", (16, 8), 0)
    frame.putpixel((5, 4), 255)
    sim.draw(sim.bounds(), frame, Point())
    assert sim.frame().getbbox() == (5, 4, 6, 5)
    assert sim.draw_count == 1


def test_simulator_frame_is_a_copy():
    sim = SimulatedTarget((4, 4))
    sim.open()
    sim.frame().putpixel((0, 0), 255)
    assert sim.frame().getbbox() is None


def test_simulator_png(tmp_path):
    sim = SimulatedTarget((4, 4))
    sim.open()
    assert sim.to_png().startswith(b"\x89PNG")
    out = tmp_path / "screen.png"
    sim.save(out)
    with Image.open(out) as im:
        assert im.size == (4, 4)


def test_simulator_concurrent_readers():
    sim = SimulatedTarget()
    sim.open()
    frame = Image.new("1", (128, 64), 255)
    errors = []

    def reader():
        try:
            for _ in range(50):
                sim.frame()
        except Exception as e:  # pragma: no cover
            errors.append(e)

    threads = [threading.Thread(target=reader) for _ in range(4)]
    for t in threads:
        t.start()
    for _ in range(50):
        sim.draw(sim.bounds(), frame, Point())
    for t in threads:
        t.join()
    assert errors == []
    assert sim.draw_count == 50


def test_simulator_close():
    sim = SimulatedTarget()
    sim.open()
    sim.close()
    assert not sim.is_open
    with pytest.raises(RuntimeError):
        sim.frame()


# =============================================================================
# Ssd1306Target (driver modules mocked)
# =============================================================================

@pytest.mark.parametrize("device,expected", [
    ("/dev/i2c-1", 1),
    ("/dev/i2c-22", 22),
    ("3", 3),
    (None, None),
    ("", None),
])
def test_bus_number(device, expected):
    assert bus_number(device) == expected


def test_bus_number_rejects_other_paths():
    with pytest.raises(ValueError):
        bus_number("/dev/ttyUSB0")


@pytest.fixture
def fake_driver(monkeypatch):
    ssd = types.ModuleType("adafruit_ssd1306")
    ssd.SSD1306_I2C = MagicMock(name="SSD1306_I2C")
    ext = types.ModuleType("adafruit_extended_bus")
    ext.ExtendedI2C = MagicMock(name="ExtendedI2C")
    monkeypatch.setitem(sys.modules, "adafruit_ssd1306", ssd)
    monkeypatch.setitem(sys.modules, "adafruit_extended_bus", ext)
    return ssd, ext


def test_oled_open_draw_close(fake_driver):
    ssd, ext = fake_driver
    oled = Ssd1306Target("/dev/i2c-1", 0x3C)
    oled.open()
    ext.ExtendedI2C.assert_called_once_with(1)
    bus = ext.ExtendedI2C.return_value
    ssd.SSD1306_I2C.assert_called_once_with(128, 64, bus, addr=0x3C)
    dev = ssd.SSD1306_I2C.return_value

    frame = Image.new("1", (128, 64), 0)
    frame.putpixel((10, 10), 255)
    oled.draw(oled.bounds(), frame, Point())
    pushed = dev.image.call_args[0][0]
    assert pushed.getbbox() == (10, 10, 11, 11)
    dev.show.assert_called()

    oled.close()
    dev.fill.assert_called_with(0)
    bus.deinit.assert_called_once()


def test_oled_open_failure_releases_bus(fake_driver):
    ssd, ext = fake_driver
    ssd.SSD1306_I2C.side_effect = OSError("no ack")
    oled = Ssd1306Target("/dev/i2c-1")
    with pytest.raises(OSError):
        oled.open()
    ext.ExtendedI2C.return_value.deinit.assert_called_once()


def test_oled_draw_before_open():
    with pytest.raises(RuntimeError):
        Ssd1306Target().draw(Rect(0, 0, 128, 64), Image.new("1", (128, 64)), Point())
