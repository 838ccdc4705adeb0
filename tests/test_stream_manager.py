"""
Stream manager tests: window, refresh, de-duplication and shift-insert
"""
from datetime import datetime

from thingstruct.models import StateItem, Weekday
from thingstruct.services.stream import StreamManager

from conftest import FakeClock, make_routine_template, make_state_template


def _states(store):
    return store.query(StateItem, sort_by="order")


class TestWindow:
    """Tests for the rolling window"""

    def test_initial_window_starts_yesterday(self, stream):
        assert stream.stream_start_time == datetime(2024, 1, 7)
        assert stream.stream_end_time == datetime(2024, 1, 10)
        assert stream.stream_dates == [
            datetime(2024, 1, 7), datetime(2024, 1, 8), datetime(2024, 1, 9),
        ]

    def test_custom_window_length(self, clock):
        stream = StreamManager(window_hours=120, clock=clock)
        assert len(stream.stream_dates) == 5
        assert stream.stream_dates[-1] == datetime(2024, 1, 11)

    def test_needs_refresh_only_after_midnight(self, stream, clock):
        assert stream.needs_refresh() is False
        clock.advance(hours=13)  # 23:30 the same day
        assert stream.needs_refresh() is False
        clock.advance(hours=1)
        assert stream.needs_refresh() is True


class TestInitializeStream:
    """Tests for initialize_stream"""

    def test_generates_only_matching_day(self, stream, store, work_routine):
        created = stream.initialize_stream([work_routine], [], store)

        assert len(created) == 1
        state = created[0]
        assert state.title == "Standup"
        assert state.order == 0
        assert state.date == datetime(2024, 1, 8)
        assert [(i.title, i.order) for i in state.checklist_items] == [("Check calendar", 0)]
        assert _states(store) == [state]

    def test_second_run_is_noop(self, stream, store, work_routine):
        stream.initialize_stream([work_routine], _states(store), store)
        created = stream.initialize_stream([work_routine], _states(store), store)

        assert created == []
        assert len(_states(store)) == 1

    def test_existing_state_blocks_generation(self, stream, store, work_routine):
        manual = StateItem(title="Manual", date=datetime(2024, 1, 8, 7))
        store.insert(manual)

        created = stream.initialize_stream([work_routine], _states(store), store)

        assert created == []
        assert _states(store) == [manual]

    def test_sets_last_refresh_time(self, stream, store, clock):
        clock.advance(minutes=5)
        stream.initialize_stream([], [], store)
        assert stream.last_refresh_time == clock.current

    def test_first_matching_template_wins(self, stream, store):
        first = make_routine_template(store, "First", [Weekday.MONDAY], [make_state_template(store, "one")])
        second = make_routine_template(store, "Second", [Weekday.MONDAY], [make_state_template(store, "two")])

        created = stream.initialize_stream([first, second], [], store)

        assert [s.title for s in created] == ["one"]

    def test_manual_only_template_never_generates(self, stream, store):
        manual = make_routine_template(store, "Manual", [], [make_state_template(store, "x")])
        assert stream.initialize_stream([manual], [], store) == []

    def test_every_matching_day_in_window(self, stream, store):
        every_day = make_routine_template(store, "Daily", list(Weekday), [make_state_template(store, "Check-in")])

        created = stream.initialize_stream([every_day], [], store)

        assert [s.date for s in created] == stream.stream_dates
        assert all(s.order == 0 for s in created)


class TestRefreshIfNeeded:
    """Tests for refresh_if_needed"""

    def test_noop_same_day(self, stream, store, work_routine):
        assert stream.refresh_if_needed([work_routine], [], store) == []
        assert store.count(StateItem) == 0

    def test_slides_window_and_generates(self, store, work_routine):
        # Saturday evening -> Sunday morning: new window is Sat, Sun, Mon
        clock = FakeClock(datetime(2024, 1, 6, 21, 0))
        stream = StreamManager(clock=clock)
        clock.advance(hours=12)

        created = stream.refresh_if_needed([work_routine], _states(store), store)

        assert stream.stream_start_time == datetime(2024, 1, 6)
        assert stream.last_refresh_time == datetime(2024, 1, 7, 9, 0)
        assert [s.date for s in created] == [datetime(2024, 1, 8)]

    def test_idempotent_per_day(self, stream, store, clock, work_routine):
        clock.advance(days=7)  # next Monday

        first = stream.refresh_if_needed([work_routine], _states(store), store)
        second = stream.refresh_if_needed([work_routine], _states(store), store)

        assert len(first) == 1
        assert second == []
        assert stream.needs_refresh() is False

    def test_existing_states_not_duplicated_after_slide(self, stream, store, clock, work_routine):
        stream.initialize_stream([work_routine], _states(store), store)
        clock.advance(days=1)  # Tuesday, window Mon-Wed still contains Monday

        created = stream.refresh_if_needed([work_routine], _states(store), store)

        assert created == []
        assert store.count(StateItem) == 1


class TestApplyTemplate:
    """Tests for manual shift-insert application"""

    def _day_of_states(self, store, count):
        states = []
        for order in range(count):
            state = StateItem(title=f"s{order}", order=order, date=datetime(2024, 1, 8))
            store.insert(state)
            states.append(state)
        return states

    def test_shift_insert_after_current(self, stream, store):
        existing = self._day_of_states(store, 4)
        template = make_routine_template(
            store, "Break", state_templates=[make_state_template(store, "new A"), make_state_template(store, "new B")]
        )

        new_states = stream.apply_template(template, existing[1], existing, store)

        assert [s.order for s in new_states] == [2, 3]
        assert [s.order for s in existing] == [0, 1, 4, 5]
        orders = [s.order for s in _states(store)]
        assert orders == sorted(set(orders))
        assert [s.title for s in _states(store)] == ["s0", "s1", "new A", "new B", "s2", "s3"]

    def test_no_current_state_appends(self, stream, store):
        existing = self._day_of_states(store, 3)
        template = make_routine_template(store, "Tail", state_templates=[make_state_template(store, "tail")])

        new_states = stream.apply_template(template, None, existing, store)

        assert [s.order for s in new_states] == [3]
        assert [s.order for s in existing] == [0, 1, 2]

    def test_empty_day(self, stream, store):
        template = make_routine_template(store, "Fresh", state_templates=[make_state_template(store, "only")])

        new_states = stream.apply_template(template, None, [], store)

        assert new_states[0].order == 0
        assert new_states[0].date == datetime(2024, 1, 8)

    def test_current_state_helper(self, store):
        states = self._day_of_states(store, 3)
        states[0].is_completed = True
        other_day = StateItem(title="tomorrow", order=0, date=datetime(2024, 1, 9))

        current = StreamManager.current_state(states + [other_day], datetime(2024, 1, 8))

        assert current is states[1]
        assert StreamManager.next_order(states + [other_day], datetime(2024, 1, 9)) == 1
        assert StreamManager.next_order(states, datetime(2024, 1, 10)) == 0
