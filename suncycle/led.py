"""
LED hardware light sink.

Features:
- LedStripSink: WS281x strip via DMA (rpi_ws281x)
- Intensity mapped to global brightness (capped at 1.0)
- Gamma correction
- Thread-safe hardware access
"""

from typing import Optional
import threading

from rpi_ws281x import PixelStrip, Color

from suncycle.config import LED_PIN, LED_FREQ_HZ, LED_DMA, LED_CHANNEL, LED_GAMMA
from suncycle.lighting_math import build_gamma_table, clamp, to_rgb255
from suncycle.sink import LightFrame, LightSink
from suncycle.logger import logger


class LedStripSink(LightSink):
    """
    Renders the sun on a WS281x strip.

    The strip has no orientation, so rotation is tracked but not rendered.
    """

    def __init__(self, count: int):
        try:
            logger.info(f"Initializing LED strip: count={count}, pin={LED_PIN}, dma={LED_DMA}")
            self.count = count
            self.gamma = build_gamma_table(LED_GAMMA)
            self.rotation: Optional[float] = None
            self._last_rgb: Optional[tuple[int, int, int]] = None

            self.strip = PixelStrip(
                count,
                LED_PIN,
                LED_FREQ_HZ,
                LED_DMA,
                False,
                255,
                LED_CHANNEL,
            )
            self.strip.begin()
            logger.info("LED strip initialized successfully")

        except Exception:
            logger.error("Failed to initialize LED hardware", exc_info=True)
            raise

        # Prevent concurrent hardware access
        self.lock = threading.Lock()

    def _apply_gamma(self, r: int, g: int, b: int) -> Color:
        return Color(self.gamma[r], self.gamma[g], self.gamma[b])

    def _fill(self, color) -> None:
        for i in range(self.strip.numPixels()):
            self.strip.setPixelColor(i, color)
        self.strip.show()

    def apply(self, frame: LightFrame) -> None:
        if frame.rotation is not None:
            self.rotation = frame.rotation

        rgb = to_rgb255(frame.color, clamp(frame.intensity))

        with self.lock:
            # Skip identical frames, the strip holds its last color
            if rgb == self._last_rgb:
                return
            self._fill(self._apply_gamma(*rgb))
            self._last_rgb = rgb

    def off(self) -> None:
        with self.lock:
            self._fill(Color(0, 0, 0))
            self._last_rgb = (0, 0, 0)
