"""
Base Command Module.

Defines the abstract base class and result type for all commands applied to
a script.

Classes:
    CommandResult: Standardized result object for command execution.
    BaseCommand: Abstract base class implementing command pattern with undo.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict

from src.core.script import ScriptData


@dataclass
class CommandResult:
    """
    Standardized result object for command execution.

    Attributes:
        success (bool): True if the command executed successfully,
                        False otherwise.
        message (str): A human-readable message describing the result.
        errors (Dict[str, str]): A dictionary of validation errors
                                 (field -> error content).
        command_name (str): The name of the command that generated
                            this result.
    """

    success: bool
    message: str = ""
    errors: Dict[str, str] = field(default_factory=dict)
    command_name: str = ""


class BaseCommand(ABC):
    """
    Abstract base class for all script changes.
    Encapsulates execution and undo support.
    """

    def __init__(self):
        """
        Initializes the command.
        """
        self._is_executed = False

    @abstractmethod
    def execute(self, script: ScriptData) -> CommandResult:
        """
        Performs the action.

        Args:
            script (ScriptData): The script to modify in place.

        Returns:
            CommandResult: Outcome of the action.
        """

    @abstractmethod
    def undo(self, script: ScriptData) -> None:
        """
        Reverts the action.

        Args:
            script (ScriptData): The script to modify in place.
        """

    @property
    def is_executed(self) -> bool:
        """
        Checks if the command has been executed.

        Returns:
            bool: True if the command has been executed, False otherwise.
        """
        return self._is_executed

    def _result(self, success: bool, message: str, **errors: str) -> CommandResult:
        return CommandResult(
            success=success,
            message=message,
            errors=dict(errors),
            command_name=self.__class__.__name__,
        )
