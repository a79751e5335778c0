"""
Layout Configuration Module.
Defines the geometry settings used by the timeline layout engine.
"""

import dataclasses
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from src.app import constants

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutConfig:
    """
    Geometry settings for the timeline.

    Attributes:
        event_width: Width of an event box in pixels.
        event_card_height: Height of an expanded event.
        capsule_height: Height of a collapsed event.
        event_gap: Horizontal gap between day columns.
        padding_x: Left padding before the first column.
        same_day_vertical_gap: Gap between stacked same-day events.
        same_day_connected_gap: Gap between stacked events that are linked.
        lane_vertical_padding: Padding above and below a lane's stacks.
        min_lane_height: Floor for lane height (also the empty canvas height).
        indentation_step: Horizontal offset per same-day indentation level.
        max_indentation_level: Cap on the indentation level.
        ruler_height: Height of the day ruler drawn above the lanes.
        highlight_colors: Palette cycled through when highlighting edges.
    """

    event_width: float = constants.EVENT_WIDTH
    event_card_height: float = constants.EVENT_CARD_HEIGHT
    capsule_height: float = constants.CAPSULE_HEIGHT
    event_gap: float = constants.EVENT_GAP
    padding_x: float = constants.PADDING_X
    same_day_vertical_gap: float = constants.SAME_DAY_VERTICAL_GAP
    same_day_connected_gap: float = constants.SAME_DAY_CONNECTED_EVENT_GAP
    lane_vertical_padding: float = constants.LANE_VERTICAL_PADDING
    min_lane_height: float = constants.MIN_LANE_HEIGHT
    indentation_step: float = constants.INDENTATION_STEP
    max_indentation_level: int = constants.MAX_INDENTATION_LEVEL
    ruler_height: float = constants.RULER_HEIGHT
    highlight_colors: tuple = field(
        default_factory=lambda: tuple(constants.HIGHLIGHT_COLORS)
    )

    def event_height(self, expanded: bool) -> float:
        """
        Returns the height of an event box.

        Args:
            expanded: Whether the event is shown as a full card.

        Returns:
            float: Card height if expanded, capsule height otherwise.
        """
        return self.event_card_height if expanded else self.capsule_height

    def validate(self) -> List[str]:
        """
        Validates the configuration.

        Returns:
            List[str]: List of validation error messages.
                       Empty list if valid.
        """
        errors: List[str] = []

        for name in (
            "event_width",
            "event_card_height",
            "capsule_height",
            "min_lane_height",
        ):
            if getattr(self, name) <= 0:
                errors.append(f"{name} must be positive, got {getattr(self, name)}")

        for name in (
            "event_gap",
            "padding_x",
            "same_day_vertical_gap",
            "same_day_connected_gap",
            "lane_vertical_padding",
            "indentation_step",
            "ruler_height",
        ):
            if getattr(self, name) < 0:
                errors.append(f"{name} must not be negative, got {getattr(self, name)}")

        if self.max_indentation_level < 0:
            errors.append("max_indentation_level must not be negative")

        if not self.highlight_colors:
            errors.append("highlight_colors must contain at least one color")

        return errors

    def to_dict(self) -> dict:
        """
        Converts the config to a dictionary for JSON serialization.

        Returns:
            dict: Dictionary representation of the configuration.
        """
        data = dataclasses.asdict(self)
        data["highlight_colors"] = list(self.highlight_colors)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "LayoutConfig":
        """
        Creates a LayoutConfig from a dictionary.

        Unknown keys are ignored; missing keys keep their defaults.

        Args:
            data: Dictionary containing configuration values.

        Returns:
            LayoutConfig: A new LayoutConfig instance.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(f"Ignoring unknown layout settings: {unknown}")
        if "highlight_colors" in values:
            values["highlight_colors"] = tuple(values["highlight_colors"])
        return cls(**values)


def load_layout_config(path: Optional[Union[str, Path]]) -> LayoutConfig:
    """
    Loads layout settings from a JSON file.

    Args:
        path: Path to a JSON object of settings, or None for defaults.

    Returns:
        LayoutConfig: The loaded configuration.

    Raises:
        ValueError: If the file content is not a valid configuration.
    """
    if path is None:
        return LayoutConfig()

    with Path(path).open("r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Layout config must be a JSON object: {path}")

    config = LayoutConfig.from_dict(data)
    errors = config.validate()
    if errors:
        raise ValueError(f"Invalid layout config {path}: {'; '.join(errors)}")

    logger.debug(f"Loaded layout config from {path}")
    return config
