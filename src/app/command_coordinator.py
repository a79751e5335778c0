"""
Command Coordinator.

Handles command execution against a script and undo/redo stack
management.
"""

import logging
from typing import Callable, List, Optional

from src.commands.base_command import BaseCommand, CommandResult
from src.core.script import ScriptData

logger = logging.getLogger(__name__)


class CommandCoordinator:
    """
    Coordinates command execution for one script.

    Manages:
    - Command execution against the script
    - Undo/redo stacks
    - Change notification so the caller can recompute the timeline

    Attributes:
        script: The script commands are applied to.
    """

    def __init__(
        self,
        script: ScriptData,
        on_change: Optional[Callable[[CommandResult], None]] = None,
    ):
        """
        Initialize the command coordinator.

        Args:
            script: The script to modify.
            on_change: Called after every successful execute, undo or redo.
        """
        self.script = script
        self._on_change = on_change
        self._undo_stack: List[BaseCommand] = []
        self._redo_stack: List[BaseCommand] = []
        logger.debug("CommandCoordinator initialized")

    def execute_command(self, command: BaseCommand) -> CommandResult:
        """
        Execute a command.

        Args:
            command: The command object to execute.

        Returns:
            CommandResult: Outcome reported by the command.
        """
        logger.debug(f"Executing command: {command.__class__.__name__}")
        result = command.execute(self.script)
        if result.success:
            logger.info(f"Command succeeded: {result.message}")
            self._undo_stack.append(command)
            self._redo_stack.clear()
            self._notify(result)
        else:
            logger.error(f"Command failed: {result.message}")
        return result

    def undo(self) -> bool:
        """
        Undo the most recent command.

        Returns:
            bool: False if there was nothing to undo.
        """
        if not self._undo_stack:
            return False
        command = self._undo_stack.pop()
        command.undo(self.script)
        self._redo_stack.append(command)
        self._notify(
            CommandResult(
                success=True,
                message="Undo",
                command_name=command.__class__.__name__,
            )
        )
        return True

    def redo(self) -> bool:
        """
        Re-execute the most recently undone command.

        Returns:
            bool: False if there was nothing to redo or it failed.
        """
        if not self._redo_stack:
            return False
        command = self._redo_stack.pop()
        result = command.execute(self.script)
        if not result.success:
            logger.error(f"Redo failed: {result.message}")
            return False
        self._undo_stack.append(command)
        self._notify(result)
        return True

    @property
    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def _notify(self, result: CommandResult) -> None:
        if self._on_change is not None:
            self._on_change(result)
