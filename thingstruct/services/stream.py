"""
State Stream Manager

Keeps a rolling window of days (yesterday, today, tomorrow by default)
populated from recurring routine templates, and inserts templates into
today's list on demand.

Generation is keyed on "does this day already have states", not on which
template produced them, so refreshing is idempotent per day. There are no
timers: callers invoke `refresh_if_needed` at observation points and it is
a no-op until a calendar day boundary has been crossed.
"""
from datetime import datetime, timedelta
from typing import Callable, Iterable, List, Optional
import logging

from ..dates import add_days, is_same_day, start_of_day
from ..models import RoutineTemplate, StateItem
from .store import EntityStore

logger = logging.getLogger(__name__)

STREAM_WINDOW_HOURS = 72

Clock = Callable[[], datetime]


class StreamManager:
    """Owns `stream_start_time` and `last_refresh_time`; owns no entities"""

    def __init__(self, window_hours: int = STREAM_WINDOW_HOURS, clock: Clock = datetime.now):
        self.window_hours = window_hours
        self._clock = clock

        now = self.now()
        # yesterday's midnight, so today sits in the middle of the window
        self.stream_start_time = add_days(start_of_day(now), -1)
        self.last_refresh_time = now

    def now(self) -> datetime:
        return self._clock()

    def today(self) -> datetime:
        return start_of_day(self.now())

    # ============ WINDOW ============

    @property
    def stream_end_time(self) -> datetime:
        return self.stream_start_time + timedelta(hours=self.window_hours)

    @property
    def stream_dates(self) -> List[datetime]:
        """Start of every day in [stream_start_time, stream_end_time)"""
        dates = []
        current = self.stream_start_time
        while current < self.stream_end_time:
            dates.append(start_of_day(current))
            current = add_days(current, 1)
        return dates

    # ============ REFRESH ============

    def needs_refresh(self) -> bool:
        """True once a calendar day boundary has passed since the last refresh"""
        return start_of_day(self.last_refresh_time) < self.today()

    def refresh_if_needed(
        self,
        routine_templates: List[RoutineTemplate],
        existing_states: List[StateItem],
        store: EntityStore,
    ) -> List[StateItem]:
        """Slide the window to the new day and fill days that have no states"""
        if not self.needs_refresh():
            return []

        now = self.now()
        self.stream_start_time = add_days(start_of_day(now), -1)
        self.last_refresh_time = now
        logger.info(f"Stream window moved to {self.stream_start_time:%Y-%m-%d} - {self.stream_end_time:%Y-%m-%d}")

        return self._generate_for_window(routine_templates, existing_states, store)

    def initialize_stream(
        self,
        routine_templates: List[RoutineTemplate],
        existing_states: List[StateItem],
        store: EntityStore,
    ) -> List[StateItem]:
        """Backfill the current window at cold start, without sliding it"""
        created = self._generate_for_window(routine_templates, existing_states, store)
        self.last_refresh_time = self.now()
        return created

    def _generate_for_window(
        self,
        routine_templates: List[RoutineTemplate],
        existing_states: List[StateItem],
        store: EntityStore,
    ) -> List[StateItem]:
        created: List[StateItem] = []
        for date in self.stream_dates:
            created.extend(
                self._generate_states_for_date_if_needed(date, routine_templates, existing_states, store)
            )
        return created

    def _generate_states_for_date_if_needed(
        self,
        date: datetime,
        routine_templates: List[RoutineTemplate],
        existing_states: List[StateItem],
        store: EntityStore,
    ) -> List[StateItem]:
        day_states = [state for state in existing_states if is_same_day(state.date, date)]
        if day_states:
            logger.debug(f"{date:%Y-%m-%d} already has {len(day_states)} states, skipping")
            return []

        # first match wins; callers hand templates in creation order
        matching = [template for template in routine_templates if template.matches_date(date)]
        if not matching:
            return []
        if len(matching) > 1:
            logger.warning(
                f"{len(matching)} routine templates recur on {date:%A}; "
                f"using '{matching[0].title}'"
            )

        template = matching[0]
        start_order = self.next_order(existing_states, date)
        states = template.create_states(date, start_order, store)
        logger.info(f"Generated {len(states)} states for {date:%Y-%m-%d} from '{template.title}'")
        return states

    # ============ MANUAL APPLICATION ============

    def apply_template(
        self,
        template: RoutineTemplate,
        current_state: Optional[StateItem],
        all_states: List[StateItem],
        store: EntityStore,
    ) -> List[StateItem]:
        """Insert a template's states into today's list.

        New states go right after `current_state`, or after everything when
        there is none. States at or past the insert position are shifted by
        the number of inserted states so relative order is kept.
        """
        today = self.today()

        if current_state is not None:
            insert_order = current_state.order + 1
        else:
            insert_order = max((state.order for state in all_states), default=-1) + 1

        shift = len(template.state_templates)
        shifted = 0
        for state in all_states:
            if state.order >= insert_order:
                state.order += shift
                shifted += 1

        logger.info(
            f"Applying '{template.title}' at order {insert_order} "
            f"({shift} new states, {shifted} shifted)"
        )
        return template.create_states(today, insert_order, store)

    # ============ HELPERS ============

    @staticmethod
    def states_for_day(states: Iterable[StateItem], day: datetime) -> List[StateItem]:
        return sorted(
            (state for state in states if is_same_day(state.date, day)),
            key=lambda state: state.order,
        )

    @classmethod
    def current_state(cls, states: Iterable[StateItem], day: datetime) -> Optional[StateItem]:
        """First incomplete state of the day"""
        for state in cls.states_for_day(states, day):
            if not state.is_completed:
                return state
        return None

    @staticmethod
    def next_order(states: Iterable[StateItem], day: datetime) -> int:
        """One past the highest order used on that day, 0 for an empty day"""
        orders = [state.order for state in states if is_same_day(state.date, day)]
        return max(orders, default=-1) + 1
