"""Tests for mock light hardware."""

from suncycle.mock_hardware import MockPixelStrip, MockLedStripSink, Color
from suncycle.sink import LightFrame


class TestMockPixelStrip:
    """Tests for MockPixelStrip."""

    def test_initialization(self):
        """Should create strip with all pixels off."""
        strip = MockPixelStrip(5, 18, 800000, 10, False, 255, 0)
        assert strip.numPixels() == 5
        assert strip.getPixelColorRGB(0) == (0, 0, 0)
        assert strip.show_count == 0

    def test_set_pixel_color(self):
        """Should decode 24-bit colors."""
        strip = MockPixelStrip(3, 18, 800000, 10, False, 255, 0)
        strip.setPixelColor(1, Color(255, 128, 64))
        assert strip.getPixelColorRGB(1) == (255, 128, 64)

    def test_out_of_range_ignored(self):
        """Should ignore indexes outside the strip."""
        strip = MockPixelStrip(2, 18, 800000, 10, False, 255, 0)
        strip.setPixelColor(5, Color(1, 2, 3))
        assert strip.getPixelColorRGB(1) == (0, 0, 0)


class TestMockColor:
    """Tests for mock Color."""

    def test_packing(self):
        """Should pack RGB into 24 bits like rpi_ws281x."""
        assert Color(255, 0, 0) == 0xFF0000
        assert Color(0, 255, 0) == 0x00FF00
        assert Color(0, 0, 255) == 0x0000FF


class TestMockLedStripSink:
    """Tests for MockLedStripSink."""

    def test_apply(self):
        """Should render the frame on the in-memory strip."""
        sink = MockLedStripSink(3)
        sink.apply(LightFrame(rotation=5.0, color=(1.0, 1.0, 1.0), intensity=1.0))

        assert sink.frames_applied == 1
        assert sink.rotation == 5.0
        assert sink.strip.getPixelColorRGB(2) == (255, 255, 255)
        assert sink.strip.show_count == 1

    def test_unchanged_color_not_shown_again(self):
        """Should count frames but skip redundant shows."""
        sink = MockLedStripSink(3)
        frame = LightFrame(rotation=None, color=(0.2, 0.4, 0.6), intensity=0.7)
        for _ in range(5):
            sink.apply(frame)

        assert sink.frames_applied == 5
        assert sink.strip.show_count == 1

    def test_zero_intensity_is_dark(self):
        """Should render black at zero intensity."""
        sink = MockLedStripSink(2)
        sink.apply(LightFrame(rotation=None, color=(1.0, 0.8, 0.8), intensity=0.0))
        assert sink.strip.getPixelColorRGB(0) == (0, 0, 0)

    def test_off(self):
        """Should blank all pixels."""
        sink = MockLedStripSink(2)
        sink.apply(LightFrame(rotation=None, color=(1.0, 1.0, 1.0), intensity=1.0))
        sink.off()

        assert sink.strip.getPixelColorRGB(0) == (0, 0, 0)
        assert sink.strip.getPixelColorRGB(1) == (0, 0, 0)
