"""Core Events Module.

Defines the StoryEvent dataclass, the unit placed on the timeline.

A StoryEvent carries:
- A date string in one of the forms understood by src.core.story_dates
- Optional references to a storyline (lane) and an event type (color tag)
- The characters involved

Events missing a storyline, type or date are kept but never laid out.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class StoryEvent:
    """
    Represents a single event in a story.
    Core unit of the Timeline.
    """

    title: str
    date: str = ""
    storyline_id: Optional[str] = None
    type_id: Optional[str] = None
    description: str = ""
    characters_involved: List[str] = field(default_factory=list)

    id: str = field(default_factory=lambda: f"e-{uuid.uuid4()}")

    @property
    def is_complete(self) -> bool:
        """
        Whether the event can be placed on the timeline.

        Returns:
            bool: True if storyline, type and date are all present.
        """
        return bool(self.storyline_id and self.type_id and self.date)

    def to_dict(self) -> Dict[str, Any]:
        """
        Converts the StoryEvent to a dictionary in script file format.

        Returns:
            Dict[str, Any]: A dictionary with camelCase keys.
        """
        return {
            "id": self.id,
            "title": self.title,
            "date": self.date,
            "storylineId": self.storyline_id,
            "typeId": self.type_id,
            "description": self.description,
            "charactersInvolved": list(self.characters_involved),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoryEvent":
        """
        Creates a StoryEvent from a dictionary.

        Accepts both the camelCase script format and snake_case keys.

        Args:
            data (Dict[str, Any]): A dictionary containing event data.

        Returns:
            StoryEvent: A new StoryEvent instance.
        """
        raw_date = data.get("date")
        kwargs: Dict[str, Any] = {
            "title": data.get("title", ""),
            "date": "" if raw_date is None else str(raw_date),
            "storyline_id": data.get("storylineId", data.get("storyline_id")),
            "type_id": data.get("typeId", data.get("type_id")),
            "description": data.get("description") or "",
            "characters_involved": list(
                data.get("charactersInvolved", data.get("characters_involved"))
                or []
            ),
        }
        if data.get("id"):
            kwargs["id"] = data["id"]
        return cls(**kwargs)
