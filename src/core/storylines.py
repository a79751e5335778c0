"""Core Storylines Module.

Defines the Storyline and EventType dataclasses.

Storylines are ordered: their list position is the vertical lane order on
the timeline. Event types only tag events with a color and never affect
ordering.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class Storyline:
    """
    A named storyline, rendered as one horizontal lane.

    Attributes:
        name: Display name shown in the lane header.
        color: Hex color of the lane header.
        description: Free text.
        id: Unique identifier.
    """

    name: str
    color: str = "#ffffff"
    description: str = ""
    id: str = field(default_factory=lambda: f"s-{uuid.uuid4()}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "color": self.color,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Storyline":
        kwargs = {
            "name": data.get("name", ""),
            "color": data.get("color") or "#ffffff",
            "description": data.get("description") or "",
        }
        if data.get("id"):
            kwargs["id"] = data["id"]
        return cls(**kwargs)


@dataclass
class EventType:
    """
    A category of event, used for visual tagging only.

    Attributes:
        name: Display name.
        color: Hex color of the event header.
        id: Unique identifier.
    """

    name: str
    color: str = "#ffffff"
    id: str = field(default_factory=lambda: f"t-{uuid.uuid4()}")

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "color": self.color}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EventType":
        kwargs = {
            "name": data.get("name", ""),
            "color": data.get("color") or "#ffffff",
        }
        if data.get("id"):
            kwargs["id"] = data["id"]
        return cls(**kwargs)
