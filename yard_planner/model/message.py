"""Message - User-facing messages for the yard planner UI.

Architecture:
- LEFT (sidebar): entity lists, notes, share link
- CENTER (above canvas): ONE blue instruction message for the current mode
- RIGHT (control panel): the length prompt while a fence awaits its length

Validation failures in the core are not exceptions for the UI: actions
return a message and the caller decides when to display it.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from yard_planner.constants import CalibrationConfig, InteractionModes
from yard_planner.core.scale_calibrator import ScaleCalibrator


class MessageLevel(Enum):
    """Display level for UI messages."""

    INFO = "info"  # Blue - context/status
    WARNING = "warning"  # Yellow - action instructions
    ERROR = "error"  # Red - failures the user should know about


@dataclass(frozen=True)
class Message(ABC):
    """Abstract base class for messages displayed inline (panels).

    Rendered as st.info/st.warning/st.error blocks that persist until replaced.
    """

    @property
    @abstractmethod
    def message(self) -> str:
        """Formatted message for display in Streamlit."""
        raise NotImplementedError

    @property
    @abstractmethod
    def level(self) -> MessageLevel:
        """Display level."""
        raise NotImplementedError

    def display(self) -> None:
        """Render this message using the appropriate Streamlit function."""
        import streamlit as st

        render_fn = {
            MessageLevel.INFO: st.info,
            MessageLevel.WARNING: st.warning,
            MessageLevel.ERROR: st.error,
        }[self.level]
        render_fn(self.message)


@dataclass(frozen=True)
class ToastMessage(ABC):
    """Abstract base class for transient popup notifications.

    Good for: discarded drafts, share confirmations, ignored edits
    Bad for: instructions or status displays
    """

    @property
    @abstractmethod
    def message(self) -> str:
        """Formatted message for the toast notification."""
        raise NotImplementedError

    @property
    @abstractmethod
    def icon(self) -> str:
        """Icon to show in toast. Override in subclasses."""
        raise NotImplementedError

    def display(self) -> None:
        """Show this message as a toast notification and log it."""
        import streamlit as st

        logger = logging.getLogger(__name__)
        logger.info(f"[TOAST] {self.icon} {self.message}")
        st.toast(f"{self.icon} {self.message}")


# =============================================================================
# TOAST MESSAGES
# =============================================================================


@dataclass(frozen=True)
class FenceDiscardedMessage(ToastMessage):
    """Length prompt was cancelled or answered with something unusable."""

    raw_input: str | None

    @property
    def icon(self) -> str:
        return "📏"

    @property
    def message(self) -> str:
        if self.raw_input is None or not self.raw_input.strip():
            return "Fence discarded: no length entered."
        return f"Fence discarded: '{self.raw_input}' is not a positive length in feet."


@dataclass(frozen=True)
class InvalidLengthMessage(ToastMessage):
    """A length or diameter edit was not a positive number of feet."""

    raw_input: str | None

    @property
    def icon(self) -> str:
        return "⚠️"

    @property
    def message(self) -> str:
        return f"'{self.raw_input or ''}' is not a positive length in feet. Nothing was changed."


@dataclass(frozen=True)
class AddressRequiredMessage(ToastMessage):
    """User tried to load the map without an address."""

    @property
    def icon(self) -> str:
        return "🏠"

    @property
    def message(self) -> str:
        return "Enter an address first."


@dataclass(frozen=True)
class CalibrationRequiredMessage(ToastMessage):
    """User edited a tree diameter before any fence was measured."""

    @property
    def icon(self) -> str:
        return "📐"

    @property
    def message(self) -> str:
        return "Draw and measure a fence first. Diameters in feet need a scale."


@dataclass(frozen=True)
class ShareLinkReadyMessage(ToastMessage):
    """Share link was generated."""

    @property
    def icon(self) -> str:
        return "🔗"

    @property
    def message(self) -> str:
        return "Link ready! Share this URL to share your yard design."


# =============================================================================
# INLINE MESSAGES
# =============================================================================


@dataclass(frozen=True)
class LoadFailedMessage(Message):
    """A shared link could not be decoded; the planner started empty."""

    reason: str

    @property
    def level(self) -> MessageLevel:
        return MessageLevel.ERROR

    @property
    def message(self) -> str:
        return f"⚠️ **Could not load the shared design**: {self.reason}. Starting with an empty yard."


@dataclass(frozen=True)
class InstructionMessage(Message):
    """CENTER panel: what a drag on the canvas does right now."""

    mode: str
    is_moving: bool = False
    awaiting_length: bool = False

    @property
    def level(self) -> MessageLevel:
        return MessageLevel.INFO

    @property
    def message(self) -> str:
        if self.awaiting_length:
            return "**Instructions:** Enter the length of this fence line in feet in the panel on the right"
        if self.is_moving:
            return "**Instructions:** Click and drag on the canvas to move the selected item"
        if self.mode == InteractionModes.VIEW:
            return "**Instructions:** Select an item to edit or move from the sidebar"
        if self.mode == InteractionModes.FENCE:
            return (
                "**Instructions:** Click to start a fence line, drag to the end point, "
                "release and enter the length in feet"
            )
        if self.mode == InteractionModes.TREE:
            return (
                "**Instructions:** Click where you want to place a tree, drag outward "
                "to set the canopy size, then release"
            )
        raise ValueError(f"Unknown mode '{self.mode}'.")


@dataclass(frozen=True)
class ScaleStatusMessage(Message):
    """Scale banner above the canvas."""

    scale: float | None

    @property
    def level(self) -> MessageLevel:
        return MessageLevel.INFO

    @property
    def message(self) -> str:
        if self.scale is None:
            return "Not calibrated yet. Sizes are shown in pixels until you measure a fence."
        decimals = CalibrationConfig.FEET_PER_PIXEL_DECIMALS
        return f"Scale: {ScaleCalibrator.feet_per_pixel(scale=self.scale):.{decimals}f} feet per pixel"
