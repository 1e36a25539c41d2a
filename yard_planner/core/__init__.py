"""Core services for yard planning.

- scale_calibrator: pixels-per-foot calibration and measurements
- address_lookup: address stub that "loads" the background canvas
- share_codec: Design <-> URL token (import directly, it depends on model)
"""

from yard_planner.core.address_lookup import AddressLookup
from yard_planner.core.scale_calibrator import (
    InvalidCalibrationInput,
    Measurement,
    ScaleCalibrator,
)

__all__ = [
    "AddressLookup",
    "InvalidCalibrationInput",
    "Measurement",
    "ScaleCalibrator",
]
