"""
Timeline Commands Module.

Provides the commands emitted by timeline gestures:
- CreateConnectionCommand: Link two events (connect gesture dropped on an event)
- MoveEventCommand: Move an event to another storyline and/or date
- ReorderStorylineCommand: Move a storyline lane to a new position

All commands support undo and return CommandResult objects.
"""

import logging
from typing import Optional

from src.app.constants import DEFAULT_CONNECTION_LABEL
from src.commands.base_command import BaseCommand, CommandResult
from src.core.connections import EventConnection
from src.core.script import ScriptData

logger = logging.getLogger(__name__)


class CreateConnectionCommand(BaseCommand):
    """
    Command to add a directed connection between two events.
    """

    def __init__(
        self,
        from_event_id: str,
        to_event_id: str,
        description: str = DEFAULT_CONNECTION_LABEL,
    ):
        """
        Initializes the CreateConnection command.

        Args:
            from_event_id (str): The cause.
            to_event_id (str): The effect.
            description (str): Connection label.
        """
        super().__init__()
        self.from_event_id = from_event_id
        self.to_event_id = to_event_id
        self.description = description
        self._created_id: Optional[str] = None

    def execute(self, script: ScriptData) -> CommandResult:
        if self.from_event_id == self.to_event_id:
            return self._result(
                False,
                "Cannot connect an event to itself.",
                to_event_id="Target equals source",
            )
        for field_name, event_id in (
            ("from_event_id", self.from_event_id),
            ("to_event_id", self.to_event_id),
        ):
            if script.get_event(event_id) is None:
                return self._result(
                    False,
                    f"Event not found: {event_id}",
                    **{field_name: "Unknown event"},
                )

        connection = EventConnection(
            from_event_id=self.from_event_id,
            to_event_id=self.to_event_id,
            description=self.description,
        )
        script.event_connections.append(connection)
        self._created_id = connection.id
        self._is_executed = True
        logger.info(f"Connected {self.from_event_id} -> {self.to_event_id}")
        return self._result(True, f"Created connection {connection.id}")

    def undo(self, script: ScriptData) -> None:
        if not self._is_executed or self._created_id is None:
            return
        script.event_connections[:] = [
            conn for conn in script.event_connections if conn.id != self._created_id
        ]
        logger.info(f"Undo: removed connection {self._created_id}")
        self._created_id = None
        self._is_executed = False

    @property
    def created_connection_id(self) -> Optional[str]:
        return self._created_id


class MoveEventCommand(BaseCommand):
    """
    Command to move an event to a storyline and date.
    """

    def __init__(self, event_id: str, new_storyline_id: str, new_date: str):
        """
        Initializes the MoveEvent command.

        Args:
            event_id (str): The event to move.
            new_storyline_id (str): Target storyline.
            new_date (str): Target date string.
        """
        super().__init__()
        self.event_id = event_id
        self.new_storyline_id = new_storyline_id
        self.new_date = new_date
        self._previous: Optional[tuple] = None

    def execute(self, script: ScriptData) -> CommandResult:
        event = script.get_event(self.event_id)
        if event is None:
            return self._result(
                False, f"Event not found: {self.event_id}", event_id="Unknown event"
            )
        if script.get_storyline(self.new_storyline_id) is None:
            return self._result(
                False,
                f"Storyline not found: {self.new_storyline_id}",
                new_storyline_id="Unknown storyline",
            )

        self._previous = (event.storyline_id, event.date)
        event.storyline_id = self.new_storyline_id
        event.date = self.new_date
        self._is_executed = True
        logger.info(
            f"Moved event {self.event_id} to {self.new_storyline_id} @ {self.new_date}"
        )
        return self._result(True, f"Moved event {event.title}")

    def undo(self, script: ScriptData) -> None:
        if not self._is_executed or self._previous is None:
            return
        event = script.get_event(self.event_id)
        if event is None:
            logger.warning(f"Undo move: event {self.event_id} no longer exists")
            return
        event.storyline_id, event.date = self._previous
        self._is_executed = False
        logger.info(f"Undo: restored event {self.event_id}")


class ReorderStorylineCommand(BaseCommand):
    """
    Command to move a storyline to a new lane position.
    """

    def __init__(self, storyline_id: str, new_index: int):
        """
        Initializes the ReorderStoryline command.

        Args:
            storyline_id (str): The storyline to move.
            new_index (int): Target position in the storyline list.
        """
        super().__init__()
        self.storyline_id = storyline_id
        self.new_index = new_index
        self._old_index: Optional[int] = None

    def execute(self, script: ScriptData) -> CommandResult:
        ids = [s.id for s in script.storylines]
        if self.storyline_id not in ids:
            return self._result(
                False,
                f"Storyline not found: {self.storyline_id}",
                storyline_id="Unknown storyline",
            )
        if not 0 <= self.new_index < len(ids):
            return self._result(
                False,
                f"Index out of range: {self.new_index}",
                new_index="Out of range",
            )

        old_index = ids.index(self.storyline_id)
        storyline = script.storylines.pop(old_index)
        script.storylines.insert(self.new_index, storyline)
        self._old_index = old_index
        self._is_executed = True
        logger.info(
            f"Moved storyline {self.storyline_id} from {old_index} to {self.new_index}"
        )
        return self._result(True, f"Reordered storyline {storyline.name}")

    def undo(self, script: ScriptData) -> None:
        if not self._is_executed or self._old_index is None:
            return
        ids = [s.id for s in script.storylines]
        if self.storyline_id not in ids:
            return
        storyline = script.storylines.pop(ids.index(self.storyline_id))
        script.storylines.insert(self._old_index, storyline)
        self._is_executed = False
        logger.info(f"Undo: storyline {self.storyline_id} back to {self._old_index}")
