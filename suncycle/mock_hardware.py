"""
Mock light hardware for running without a physical strip.

Enable mock mode by setting MOCK_MODE=true in .env

Features:
- Mock pixel strip that keeps pixel values in memory
- Mock light sink with frame logging
- Compatible interface with suncycle.led.LedStripSink
"""

import threading
from typing import Optional

from suncycle.lighting_math import build_gamma_table, clamp, to_rgb255
from suncycle.sink import LightFrame, LightSink
from suncycle.logger import logger


class MockPixelStrip:
    """Mock implementation of rpi_ws281x.PixelStrip"""

    def __init__(self, num, pin, freq_hz, dma, invert, brightness, channel):
        self._num_pixels = num
        self._pixels = [(0, 0, 0)] * num
        self.show_count = 0
        logger.info(f"[MOCK] Initialized LED strip: {num} pixels on pin {pin}")

    def begin(self):
        """Initialize the strip (no-op for mock)"""
        logger.debug("[MOCK] LED strip initialized")

    def numPixels(self):
        """Return number of pixels"""
        return self._num_pixels

    def setPixelColor(self, n, color):
        """Set pixel color from a 24-bit value"""
        if 0 <= n < self._num_pixels:
            self._pixels[n] = ((color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF)

    def getPixelColorRGB(self, n):
        """Return (r, g, b) of one pixel"""
        return self._pixels[n]

    def show(self):
        """Push pixels (counted only)"""
        self.show_count += 1


def Color(r, g, b):
    """Mock Color function (compatible with rpi_ws281x)"""
    return (r << 16) | (g << 8) | b


class MockLedStripSink(LightSink):
    """
    Mock sun light.

    Drop-in replacement for suncycle.led.LedStripSink when MOCK_MODE=true.
    Logs phase-visible changes instead of driving hardware.
    """

    def __init__(self, count: int):
        logger.info(f"[MOCK] Creating LED strip with {count} LEDs")
        self.count = count
        self.gamma = build_gamma_table(2.2)
        self.rotation: Optional[float] = None
        self.frames_applied = 0
        self._last_rgb: Optional[tuple[int, int, int]] = None

        self.strip = MockPixelStrip(count, 18, 800000, 10, False, 255, 0)
        self.strip.begin()

        self.lock = threading.Lock()
        logger.info("[MOCK] LED strip ready (mock mode)")

    def apply(self, frame: LightFrame) -> None:
        with self.lock:
            self.frames_applied += 1

            if frame.rotation is not None:
                self.rotation = frame.rotation
                logger.debug(f"[MOCK] Sun rotated to {frame.rotation:.2f}°")

            rgb = to_rgb255(frame.color, clamp(frame.intensity))
            if rgb == self._last_rgb:
                return

            r, g, b = rgb
            color = Color(self.gamma[r], self.gamma[g], self.gamma[b])
            for i in range(self.strip.numPixels()):
                self.strip.setPixelColor(i, color)
            self.strip.show()
            self._last_rgb = rgb
            logger.debug(f"[MOCK] Sun color={rgb}, intensity={frame.intensity:.3f}")

    def off(self) -> None:
        with self.lock:
            for i in range(self.strip.numPixels()):
                self.strip.setPixelColor(i, Color(0, 0, 0))
            self.strip.show()
            self._last_rgb = (0, 0, 0)
            logger.info("[MOCK] LEDs turned off")
