"""Core Connections Module.

Defines the EventConnection dataclass representing directed causal links
between story events.

Connections are not validated at the data level:
- Self-loops (from == to) are allowed
- Duplicates (same from/to pair) are allowed and drawn twice
- Endpoints may reference events that no longer exist
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict

from src.app.constants import DEFAULT_CONNECTION_LABEL


@dataclass
class EventConnection:
    """
    Represents a directed link from one event to another.

    Attributes:
        from_event_id: ID of the cause.
        to_event_id: ID of the effect.
        description: Free-text label (e.g. "导致").
        id: Unique identifier (auto-generated).
    """

    from_event_id: str
    to_event_id: str
    description: str = DEFAULT_CONNECTION_LABEL
    id: str = field(default_factory=lambda: f"conn-{uuid.uuid4()}")

    def touches(self, event_id: str) -> bool:
        """
        Checks whether the connection has the event at either end.

        Args:
            event_id: The event to check.

        Returns:
            bool: True if the event is the source or the target.
        """
        return self.from_event_id == event_id or self.to_event_id == event_id

    def links(self, first_id: str, second_id: str) -> bool:
        """
        Checks whether the connection joins two events in either direction.
        """
        return (
            self.from_event_id == first_id and self.to_event_id == second_id
        ) or (self.from_event_id == second_id and self.to_event_id == first_id)

    def to_dict(self) -> Dict[str, Any]:
        """
        Converts the EventConnection to a dictionary in script file format.

        Returns:
            Dict[str, Any]: A dictionary with camelCase keys.
        """
        return {
            "id": self.id,
            "fromEventId": self.from_event_id,
            "toEventId": self.to_event_id,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EventConnection":
        """
        Creates an EventConnection from a dictionary.

        Args:
            data: A dictionary containing connection data.

        Returns:
            EventConnection: A new EventConnection instance.
        """
        kwargs = {
            "from_event_id": data.get("fromEventId", data.get("from_event_id", "")),
            "to_event_id": data.get("toEventId", data.get("to_event_id", "")),
            "description": data.get("description", DEFAULT_CONNECTION_LABEL),
        }
        if data.get("id"):
            kwargs["id"] = data["id"]
        return cls(**kwargs)
