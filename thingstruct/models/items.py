"""
Live Entity Models (states and routines)
"""
from pydantic import BaseModel, Field, field_validator
from typing import ClassVar, List, Optional, Tuple
from datetime import datetime
import uuid

from ..dates import start_of_day
from .checklist import ChecklistItem, ChecklistOwnerMixin


class StateItem(ChecklistOwnerMixin, BaseModel):
    """A task for one day, optionally carrying a checklist"""
    cascade_relationships: ClassVar[Tuple[str, ...]] = ("checklist_items",)
    nullify_relationships: ClassVar[Tuple[str, ...]] = ()

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str
    order: int = 0
    is_completed: bool = False
    date: datetime = Field(default_factory=lambda: start_of_day(datetime.now()))
    checklist_items: List[ChecklistItem] = Field(default_factory=list)

    @field_validator("date")
    @classmethod
    def truncate_to_day(cls, value: datetime) -> datetime:
        return start_of_day(value)

    @property
    def incomplete_checklist_count(self) -> int:
        return sum(1 for item in self.checklist_items if not item.is_completed)

    @property
    def total_checklist_count(self) -> int:
        return len(self.checklist_items)

    def update_completion_status(self) -> bool:
        """Recompute `is_completed` from the checklist.

        An empty checklist leaves the flag untouched. The field is written
        only when the value actually changes; returns whether it did.
        """
        if not self.checklist_items:
            return False

        all_completed = all(item.is_completed for item in self.checklist_items)
        if all_completed != self.is_completed:
            self.is_completed = all_completed
            return True
        return False

    def toggle_checklist_item(self, item_id: str, now: Optional[datetime] = None) -> Optional[ChecklistItem]:
        """Flip one checklist item and refresh the state's completion"""
        item = self.find_checklist_item(item_id)
        if item is None:
            return None

        item.is_completed = not item.is_completed
        item.completed_date = (now or datetime.now()) if item.is_completed else None
        self.update_completion_status()
        return item


class RoutineItem(BaseModel):
    """All states generated for one day from a routine template"""
    cascade_relationships: ClassVar[Tuple[str, ...]] = ("state_items",)
    nullify_relationships: ClassVar[Tuple[str, ...]] = ()

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str = ""
    date: datetime = Field(default_factory=lambda: start_of_day(datetime.now()))
    state_items: List[StateItem] = Field(default_factory=list)

    @field_validator("date")
    @classmethod
    def truncate_to_day(cls, value: datetime) -> datetime:
        return start_of_day(value)

    @property
    def completed_state_count(self) -> int:
        return sum(1 for state in self.state_items if state.is_completed)

    @property
    def total_state_count(self) -> int:
        return len(self.state_items)

    @property
    def is_completed(self) -> bool:
        return bool(self.state_items) and all(state.is_completed for state in self.state_items)
