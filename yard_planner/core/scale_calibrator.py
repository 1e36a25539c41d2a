"""Scale calibration between canvas pixels and real-world feet.

The design keeps a single global ratio (pixels per foot). Every fence the user
measures is an observation of that ratio:

    observation = pixel_length / length_ft

The first observation becomes the scale. Every later observation pulls the
scale halfway towards itself (two-term average, not a cumulative mean):

    scale = (scale + observation) / 2

Displayed sizes are pixels / scale. Without a scale, measurements fall back to
raw pixels and are flagged as uncalibrated.
"""

import logging
import math
from dataclasses import dataclass

from yard_planner.constants import CalibrationConfig

logger = logging.getLogger(__name__)


class InvalidCalibrationInput(ValueError):
    """Length entry that is not a positive, finite number of feet."""


@dataclass(frozen=True)
class Measurement:
    """A real-world size, or the raw pixel size when uncalibrated.

    Attributes:
        value: Size in feet when calibrated, in pixels otherwise
        calibrated: True if value is in feet
    """

    value: float
    calibrated: bool

    @property
    def unit(self) -> str:
        return CalibrationConfig.FEET_UNIT if self.calibrated else CalibrationConfig.PIXEL_UNIT

    def format(self) -> str:
        """Format for display, e.g. "12.5 ft" or "25 px"."""
        decimals = CalibrationConfig.FEET_DECIMALS if self.calibrated else CalibrationConfig.PIXEL_DECIMALS
        return f"{self.value:.{decimals}f} {self.unit}"


class ScaleCalibrator:
    """Static methods deriving and applying the pixels-per-foot ratio.

    All lengths passed in are pixels unless the parameter name ends in _ft.
    A scale is always a positive float or None (uncalibrated).
    """

    @staticmethod
    def validate_length(length_ft: object) -> float:
        """Check a real-world length and return it as float.

        Raises:
            InvalidCalibrationInput: If not a positive finite number.
        """
        if isinstance(length_ft, bool) or not isinstance(length_ft, (int, float)):
            raise InvalidCalibrationInput(f"Length must be a number, got {length_ft!r}")
        value = float(length_ft)
        if not math.isfinite(value) or value <= 0:
            raise InvalidCalibrationInput(f"Length must be a positive finite number of feet, got {value}")
        return value

    @staticmethod
    def parse_length_input(raw: str | None) -> float:
        """Parse the text a user typed into the length prompt.

        Args:
            raw: Prompt text, None or empty when the prompt was dismissed

        Returns:
            Length in feet.

        Raises:
            InvalidCalibrationInput: If empty, not numeric, or not positive/finite.
        """
        if raw is None or not raw.strip():
            raise InvalidCalibrationInput("No length entered")
        try:
            value = float(raw.strip())
        except ValueError as e:
            raise InvalidCalibrationInput(f"Not a number: {raw!r}") from e
        return ScaleCalibrator.validate_length(value)

    @staticmethod
    def implied_ratio(pixel_length: float, length_ft: float) -> float:
        """Pixels per foot implied by one measured fence."""
        return pixel_length / ScaleCalibrator.validate_length(length_ft)

    @staticmethod
    def refine(current_scale: float | None, observation: float) -> float | None:
        """Fold one observation into the scale.

        Args:
            current_scale: Existing pixels-per-foot, or None if uncalibrated
            observation: Ratio implied by the newest measurement

        Returns:
            The new scale. Unusable observations (zero-length fence, NaN)
            leave the current scale untouched.
        """
        if not math.isfinite(observation) or observation <= 0:
            logger.warning(f"Ignoring unusable scale observation {observation}")
            return current_scale
        if current_scale is None:
            logger.info(f"Scale calibrated: {observation:.4f} px/ft")
            return observation
        refined = (current_scale + observation) / 2
        logger.info(f"Scale refined: {current_scale:.4f} + {observation:.4f} -> {refined:.4f} px/ft")
        return refined

    @staticmethod
    def calibrate(current_scale: float | None, pixel_length: float, length_ft: float) -> float | None:
        """Refine the scale from a fence's pixel length and its entered length."""
        observation = ScaleCalibrator.implied_ratio(pixel_length=pixel_length, length_ft=length_ft)
        return ScaleCalibrator.refine(current_scale=current_scale, observation=observation)

    @staticmethod
    def to_real_world(pixels: float, scale: float | None) -> Measurement:
        """Convert a pixel size to feet, or flag it as uncalibrated."""
        if scale is None:
            return Measurement(value=pixels, calibrated=False)
        return Measurement(value=pixels / scale, calibrated=True)

    @staticmethod
    def feet_to_pixels(length_ft: float, scale: float) -> float:
        """Convert feet back to canvas pixels (requires a scale)."""
        return ScaleCalibrator.validate_length(length_ft) * scale

    @staticmethod
    def feet_per_pixel(scale: float) -> float:
        """Inverse ratio shown in the scale banner."""
        return 1 / scale
