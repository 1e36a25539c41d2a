"""Tests for user-facing message texts."""

import pytest

from yard_planner.constants import InteractionModes
from yard_planner.model.message import (
    FenceDiscardedMessage,
    InstructionMessage,
    InvalidLengthMessage,
    LoadFailedMessage,
    MessageLevel,
    ScaleStatusMessage,
)


class TestInstructionMessage:
    @pytest.mark.parametrize(
        "mode,fragment",
        [
            (InteractionModes.VIEW, "Select an item"),
            (InteractionModes.FENCE, "start a fence line"),
            (InteractionModes.TREE, "place a tree"),
        ],
    )
    def test_text_per_mode(self, mode: str, fragment: str) -> None:
        message = InstructionMessage(mode=mode)
        assert fragment in message.message
        assert message.level == MessageLevel.INFO

    def test_prompt_and_move_override_mode(self) -> None:
        assert "length" in InstructionMessage(mode=InteractionModes.FENCE, awaiting_length=True).message
        assert "move the selected item" in InstructionMessage(mode=InteractionModes.VIEW, is_moving=True).message

    def test_unknown_mode_raises(self) -> None:
        with pytest.raises(ValueError):
            _ = InstructionMessage(mode="erase").message


class TestStatusMessages:
    def test_scale_banner(self) -> None:
        assert ScaleStatusMessage(scale=2.0).message == "Scale: 0.50 feet per pixel"
        assert "Not calibrated" in ScaleStatusMessage(scale=None).message

    def test_load_failure_is_an_error(self) -> None:
        message = LoadFailedMessage(reason="the link is damaged")
        assert message.level == MessageLevel.ERROR
        assert "the link is damaged" in message.message


class TestToasts:
    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_fence_discarded_without_input(self, raw: str | None) -> None:
        assert FenceDiscardedMessage(raw_input=raw).message == "Fence discarded: no length entered."

    def test_fence_discarded_with_input(self) -> None:
        assert "'abc'" in FenceDiscardedMessage(raw_input="abc").message

    def test_invalid_length(self) -> None:
        assert InvalidLengthMessage(raw_input="-3").message.startswith("'-3' is not a positive length")
