"""
Template Models

StateTemplate is the blueprint of one state; RoutineTemplate is an ordered
list of state templates plus an optional weekday recurrence rule.
"""
from pydantic import BaseModel, Field, field_serializer, field_validator
from typing import Any, ClassVar, List, Optional, Set, Tuple, TYPE_CHECKING
from datetime import datetime
import uuid

from .checklist import ChecklistItem, ChecklistOwnerMixin
from .items import RoutineItem, StateItem
from .weekday import Weekday, weekdays_from_list, weekdays_to_list

if TYPE_CHECKING:
    from ..services.store import EntityStore


class StateTemplate(ChecklistOwnerMixin, BaseModel):
    """Reusable state blueprint. Its checklist items are default text and
    are never completed themselves."""
    cascade_relationships: ClassVar[Tuple[str, ...]] = ("checklist_items",)
    nullify_relationships: ClassVar[Tuple[str, ...]] = ()

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str
    checklist_items: List[ChecklistItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)

    def create_state(self, date: datetime, order: int, store: "EntityStore") -> StateItem:
        """Instantiate a live state for `date`.

        Inserts the state and one fresh checklist item per blueprint item,
        numbered by blueprint position.
        """
        state = StateItem(title=self.title, date=date, order=order)
        store.insert(state)

        for index, blueprint in enumerate(self.sorted_checklist()):
            item = ChecklistItem(title=blueprint.title, order=index)
            store.insert(item)
            state.checklist_items.append(item)

        return state


class RoutineTemplate(BaseModel):
    """Routine template model"""
    cascade_relationships: ClassVar[Tuple[str, ...]] = ()
    # state templates live in the library on their own
    nullify_relationships: ClassVar[Tuple[str, ...]] = ("state_templates",)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str
    repeat_days: Set[Weekday] = Field(default_factory=set)  # empty: manual only
    state_templates: List[StateTemplate] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator("repeat_days", mode="before")
    @classmethod
    def drop_unknown_days(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple, set, frozenset)):
            return weekdays_from_list(value)
        return value

    @field_serializer("repeat_days")
    def serialize_repeat_days(self, days: Set[Weekday]) -> List[int]:
        return weekdays_to_list(days)

    @property
    def has_auto_repeat(self) -> bool:
        return bool(self.repeat_days)

    def matches_date(self, date: datetime) -> bool:
        if not self.has_auto_repeat:
            return False
        return Weekday.from_date(date) in self.repeat_days

    def create_routine(self, date: datetime, store: "EntityStore") -> RoutineItem:
        """Create a RoutineItem holding one state per state template"""
        routine = RoutineItem(title=self.title, date=date)
        store.insert(routine)

        for index, state_template in enumerate(self.state_templates):
            state = state_template.create_state(date, index, store)
            routine.state_items.append(state)

        return routine

    def create_states(self, date: datetime, start_order: int, store: "EntityStore") -> List[StateItem]:
        """Create states without a RoutineItem, ordered from `start_order`"""
        return [
            state_template.create_state(date, start_order + index, store)
            for index, state_template in enumerate(self.state_templates)
        ]

    # ============ EDITING ============

    def add_state_template(self, state_template: StateTemplate) -> None:
        self.state_templates.append(state_template)

    def remove_state_template(self, state_template_id: str) -> Optional[StateTemplate]:
        for index, state_template in enumerate(self.state_templates):
            if state_template.id == state_template_id:
                return self.state_templates.pop(index)
        return None

    def move_state_template(self, from_index: int, to_index: int) -> None:
        """Move one entry; generation order follows list order"""
        state_template = self.state_templates.pop(from_index)
        to_index = max(0, min(to_index, len(self.state_templates)))
        self.state_templates.insert(to_index, state_template)
