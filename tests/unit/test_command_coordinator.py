from unittest.mock import MagicMock

import pytest

from src.app.command_coordinator import CommandCoordinator
from src.commands.base_command import CommandResult
from src.commands.timeline_commands import MoveEventCommand, ReorderStorylineCommand


@pytest.fixture
def on_change():
    return MagicMock()


@pytest.fixture
def coordinator(sample_script, on_change):
    return CommandCoordinator(sample_script, on_change=on_change)


def test_initialization(coordinator, sample_script):
    assert coordinator.script is sample_script
    assert not coordinator.can_undo
    assert not coordinator.can_redo


def test_execute_command_success(coordinator, sample_script, on_change):
    result = coordinator.execute_command(ReorderStorylineCommand("s2", 0))

    assert result.success
    assert sample_script.storylines[0].id == "s2"
    assert coordinator.can_undo
    on_change.assert_called_once_with(result)


def test_execute_command_failure(coordinator, on_change):
    result = coordinator.execute_command(ReorderStorylineCommand("missing", 0))

    assert not result.success
    assert not coordinator.can_undo
    on_change.assert_not_called()


def test_undo_and_redo(coordinator, sample_script, on_change):
    coordinator.execute_command(MoveEventCommand("e1", "s2", "2020-01-02"))

    assert coordinator.undo() is True
    assert sample_script.get_event("e1").storyline_id == "s1"
    assert coordinator.can_redo

    assert coordinator.redo() is True
    assert sample_script.get_event("e1").storyline_id == "s2"
    assert coordinator.can_undo
    assert not coordinator.can_redo
    assert on_change.call_count == 3


def test_undo_notifies_with_command_name(coordinator, on_change):
    coordinator.execute_command(ReorderStorylineCommand("s2", 0))
    coordinator.undo()

    result = on_change.call_args[0][0]
    assert isinstance(result, CommandResult)
    assert result.message == "Undo"
    assert result.command_name == "ReorderStorylineCommand"


def test_new_command_clears_redo(coordinator):
    coordinator.execute_command(ReorderStorylineCommand("s2", 0))
    coordinator.undo()
    coordinator.execute_command(ReorderStorylineCommand("s1", 1))
    assert not coordinator.can_redo


def test_empty_stacks(coordinator):
    assert coordinator.undo() is False
    assert coordinator.redo() is False


def test_failed_redo_is_dropped(coordinator, sample_script):
    coordinator.execute_command(MoveEventCommand("e1", "s2", "2020-01-02"))
    coordinator.undo()
    sample_script.storylines = [s for s in sample_script.storylines if s.id != "s2"]

    assert coordinator.redo() is False
    assert not coordinator.can_redo
    assert not coordinator.can_undo


def test_without_callback(sample_script):
    coordinator = CommandCoordinator(sample_script)
    assert coordinator.execute_command(ReorderStorylineCommand("s2", 1)).success
