"""
Shared fixtures: a controllable clock, a fresh store and template builders
"""
import pytest
from datetime import datetime, timedelta

from thingstruct.models import ChecklistItem, RoutineTemplate, StateTemplate, Weekday
from thingstruct.services.store import InMemoryStore
from thingstruct.services.stream import StreamManager

# 2024-01-08 is a Monday
MONDAY = datetime(2024, 1, 8, 10, 30)


class FakeClock:
    """Callable clock that tests move forward by hand"""

    def __init__(self, now: datetime = MONDAY):
        self.current = now

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def stream(clock):
    return StreamManager(clock=clock)


def make_state_template(store, title, items=()):
    template = StateTemplate(title=title)
    store.insert(template)
    for index, item_title in enumerate(items):
        item = ChecklistItem(title=item_title, order=index)
        store.insert(item)
        template.checklist_items.append(item)
    return template


def make_routine_template(store, title, days=(), state_templates=()):
    template = RoutineTemplate(title=title, repeat_days=set(days), state_templates=list(state_templates))
    store.insert(template)
    return template


@pytest.fixture
def work_routine(store):
    """Routine "Work" on Mondays with one state "Standup" -> ["Check calendar"]"""
    standup = make_state_template(store, "Standup", ["Check calendar"])
    return make_routine_template(store, "Work", [Weekday.MONDAY], [standup])
