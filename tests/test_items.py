"""
Live entity tests: completion derivation and checklist editing
"""
from datetime import datetime

from thingstruct.models import ChecklistItem, RoutineItem, StateItem


def _state_with_items(store, completed):
    state = StateItem(title="Task", date=datetime(2024, 1, 8))
    store.insert(state)
    for index, done in enumerate(completed):
        item = ChecklistItem(title=f"item {index}", order=index, is_completed=done)
        store.insert(item)
        state.checklist_items.append(item)
    return state


class TestCompletion:
    """Tests for StateItem.update_completion_status"""

    def test_partial_checklist_is_incomplete(self, store):
        state = _state_with_items(store, [True, True, False])
        state.update_completion_status()
        assert state.is_completed is False
        assert state.incomplete_checklist_count == 1
        assert state.total_checklist_count == 3

    def test_completing_last_item(self, store):
        state = _state_with_items(store, [True, True, False])
        state.checklist_items[2].is_completed = True

        changed = state.update_completion_status()

        assert changed is True
        assert state.is_completed is True

    def test_unchanged_value_reports_no_write(self, store):
        state = _state_with_items(store, [False])
        assert state.update_completion_status() is False

    def test_empty_checklist_left_alone(self, store):
        state = _state_with_items(store, [])
        state.is_completed = True

        assert state.update_completion_status() is False
        assert state.is_completed is True

    def test_toggle_sets_completed_date(self, store):
        state = _state_with_items(store, [False])
        item_id = state.checklist_items[0].id
        now = datetime(2024, 1, 8, 9, 15)

        item = state.toggle_checklist_item(item_id, now=now)
        assert item.is_completed is True
        assert item.completed_date == now
        assert state.is_completed is True

        item = state.toggle_checklist_item(item_id, now=now)
        assert item.is_completed is False
        assert item.completed_date is None
        assert state.is_completed is False

    def test_toggle_unknown_item(self, store):
        state = _state_with_items(store, [False])
        assert state.toggle_checklist_item("missing") is None


class TestChecklistEditing:
    """Tests for dense ordering after checklist edits"""

    def test_add_appends_at_end(self, store):
        state = _state_with_items(store, [False, False])
        item = state.add_checklist_item("third", store)
        assert item.order == 2
        assert store.contains(item)

    def test_remove_renumbers(self, store):
        state = _state_with_items(store, [False, False, False])
        middle = state.checklist_items[1]

        removed = state.remove_checklist_item(middle.id, store)

        assert removed is middle
        assert not store.contains(middle)
        assert [i.title for i in state.sorted_checklist()] == ["item 0", "item 2"]
        assert [i.order for i in state.sorted_checklist()] == [0, 1]

    def test_state_date_truncated(self):
        state = StateItem(title="Late", date=datetime(2024, 1, 8, 23, 59, 59))
        assert state.date == datetime(2024, 1, 8)


class TestRoutineItem:
    """Tests for RoutineItem aggregates"""

    def test_counts_and_completion(self):
        routine = RoutineItem(title="Day", date=datetime(2024, 1, 8, 12))
        assert routine.is_completed is False

        routine.state_items = [
            StateItem(title="a", is_completed=True),
            StateItem(title="b"),
        ]
        assert routine.completed_state_count == 1
        assert routine.total_state_count == 2
        assert routine.is_completed is False

        routine.state_items[1].is_completed = True
        assert routine.is_completed is True
