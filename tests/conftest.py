import json
import pathlib
import sys
from datetime import date

import pytest

# Ensure project root is in sys.path
repo_root = pathlib.Path(__file__).parent.parent
sys.path.insert(0, str(repo_root))

from src.core.connections import EventConnection  # noqa: E402
from src.core.events import StoryEvent  # noqa: E402
from src.core.script import ScriptData  # noqa: E402
from src.core.storylines import EventType, Storyline  # noqa: E402


@pytest.fixture
def sample_script() -> ScriptData:
    """
    Two storylines over three Gregorian days.

    Main (s1): e1 and e2 on 2020-01-01 (linked), e3 on 2020-01-03.
    Side (s2): e4 on 2020-01-02.
    e5 has no storyline and is never laid out.
    """
    return ScriptData(
        storylines=[
            Storyline(id="s1", name="主线", color="#ff0000"),
            Storyline(id="s2", name="支线", color="#00ff00"),
        ],
        event_types=[EventType(id="t1", name="冲突", color="#3366ff")],
        events=[
            StoryEvent(id="e1", title="开端", date="2020-01-01", storyline_id="s1", type_id="t1"),
            StoryEvent(
                id="e2",
                title="转折",
                date="2020-01-01 08:00:00",
                storyline_id="s1",
                type_id="t1",
            ),
            StoryEvent(id="e3", title="高潮", date="2020-01-03", storyline_id="s1", type_id="t1"),
            StoryEvent(id="e4", title="伏笔", date="2020-01-02", storyline_id="s2", type_id="t1"),
            StoryEvent(id="e5", title="草稿", date="2020-01-05", storyline_id=None, type_id="t1"),
        ],
        event_connections=[
            EventConnection(id="c1", from_event_id="e1", to_event_id="e2"),
            EventConnection(id="c2", from_event_id="e2", to_event_id="e3"),
            EventConnection(id="c3", from_event_id="e4", to_event_id="e3"),
        ],
        era_order=["公元纪年"],
    )


@pytest.fixture
def script_file(tmp_path, sample_script) -> pathlib.Path:
    """Writes the sample script to a temporary JSON file."""
    path = tmp_path / "story.json"
    path.write_text(
        json.dumps(sample_script.to_dict(), ensure_ascii=False), encoding="utf-8"
    )
    return path


@pytest.fixture
def fixed_today():
    """Clock returning a fixed day for drop-target tests."""
    return lambda: date(2024, 5, 6)
