"""
Script Module.

A script is the whole data set of one story: storylines, event types,
events, event connections and the era order. This module provides the
ScriptData container and JSON file loading/saving.

Character data (characters, relationships, groups) is not used by the
timeline and is carried through as raw dictionaries.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from src.app.constants import DEFAULT_ERA_ORDER, GREGORIAN_ANCHOR_ERA
from src.core.connections import EventConnection
from src.core.events import StoryEvent
from src.core.storylines import EventType, Storyline

logger = logging.getLogger(__name__)


class ScriptFormatError(ValueError):
    """Raised when a script file cannot be parsed."""


@dataclass
class ScriptData:
    """
    Complete data of a story script.

    Attributes:
        storylines: Lanes in display order.
        event_types: Event categories.
        events: All events, complete or not.
        event_connections: Directed causal links.
        era_order: Era names in chronological order, including the anchor.
        characters: Raw character records.
        character_relationships: Raw relationship records.
        character_groups: Raw group records.
    """

    storylines: List[Storyline] = field(default_factory=list)
    event_types: List[EventType] = field(default_factory=list)
    events: List[StoryEvent] = field(default_factory=list)
    event_connections: List[EventConnection] = field(default_factory=list)
    era_order: List[str] = field(default_factory=lambda: list(DEFAULT_ERA_ORDER))
    characters: List[Dict[str, Any]] = field(default_factory=list)
    character_relationships: List[Dict[str, Any]] = field(default_factory=list)
    character_groups: List[Dict[str, Any]] = field(default_factory=list)

    def get_event(self, event_id: str) -> Optional[StoryEvent]:
        """
        Looks up an event by ID.

        Args:
            event_id: The event ID.

        Returns:
            Optional[StoryEvent]: The event, or None if not found.
        """
        for event in self.events:
            if event.id == event_id:
                return event
        return None

    def get_storyline(self, storyline_id: str) -> Optional[Storyline]:
        for storyline in self.storylines:
            if storyline.id == storyline_id:
                return storyline
        return None

    def to_dict(self) -> Dict[str, Any]:
        """
        Converts the script to a dictionary in script file format.

        Returns:
            Dict[str, Any]: JSON-serializable representation.
        """
        return {
            "storylines": [s.to_dict() for s in self.storylines],
            "eventTypes": [t.to_dict() for t in self.event_types],
            "events": [e.to_dict() for e in self.events],
            "eventConnections": [c.to_dict() for c in self.event_connections],
            "characters": list(self.characters),
            "characterRelationships": list(self.character_relationships),
            "characterGroups": list(self.character_groups),
            "eraOrder": list(self.era_order),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScriptData":
        """
        Creates ScriptData from a dictionary.

        Accepts either the bare data object or a ``{"id", "name", "data"}``
        script envelope. The anchor era is appended to the era order when
        missing.

        Args:
            data: Parsed script JSON.

        Returns:
            ScriptData: A new instance.
        """
        if isinstance(data.get("data"), dict):
            data = data["data"]

        era_order = [str(era) for era in data.get("eraOrder") or []]
        if GREGORIAN_ANCHOR_ERA not in era_order:
            era_order.append(GREGORIAN_ANCHOR_ERA)

        return cls(
            storylines=[Storyline.from_dict(s) for s in data.get("storylines", [])],
            event_types=[EventType.from_dict(t) for t in data.get("eventTypes", [])],
            events=[StoryEvent.from_dict(e) for e in data.get("events", [])],
            event_connections=[
                EventConnection.from_dict(c)
                for c in data.get("eventConnections", [])
            ],
            era_order=era_order,
            characters=list(data.get("characters", [])),
            character_relationships=list(data.get("characterRelationships", [])),
            character_groups=list(data.get("characterGroups", [])),
        )


def load_script(path: Union[str, Path]) -> ScriptData:
    """
    Loads a script from a JSON file.

    Args:
        path: Path to the script file.

    Returns:
        ScriptData: The parsed script.

    Raises:
        FileNotFoundError: If the file does not exist.
        ScriptFormatError: If the file is not a valid script.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ScriptFormatError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ScriptFormatError(f"Script root must be an object: {path}")

    try:
        script = ScriptData.from_dict(raw)
    except (TypeError, AttributeError) as e:
        raise ScriptFormatError(f"Malformed script {path}: {e}") from e

    logger.info(
        f"Loaded script {path.name}: {len(script.events)} events, "
        f"{len(script.storylines)} storylines, "
        f"{len(script.event_connections)} connections"
    )
    return script


def save_script(script: ScriptData, path: Union[str, Path]) -> None:
    """
    Writes a script to a JSON file.

    Args:
        script: The script to save.
        path: Destination file path.
    """
    path = Path(path)
    with path.open("w", encoding="utf-8") as f:
        json.dump(script.to_dict(), f, ensure_ascii=False, indent=2)
    logger.debug(f"Saved script to {path}")
