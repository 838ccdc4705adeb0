"""
API Request / Response Models
"""
from pydantic import BaseModel
from typing import Dict, List, Optional
from datetime import datetime

from .templates import RoutineTemplate
from .weekday import Weekday


class StateTemplateCreate(BaseModel):
    """Request for creating a state template"""
    title: str
    items: List[str] = []


class StateTemplateUpdate(BaseModel):
    """Request for updating a state template"""
    title: Optional[str] = None
    items: Optional[List[str]] = None


class RoutineTemplateCreate(BaseModel):
    """Request for creating a routine template"""
    title: str
    repeat_days: List[Weekday] = []
    state_template_ids: List[str] = []


class RoutineTemplateUpdate(BaseModel):
    """Request for updating a routine template"""
    title: Optional[str] = None
    repeat_days: Optional[List[Weekday]] = None
    state_template_ids: Optional[List[str]] = None


class RoutineTemplateSaved(BaseModel):
    """Saved routine template with advisory recurrence conflicts"""
    template: RoutineTemplate
    conflicting_days: List[Weekday] = []


class OccupancyResponse(BaseModel):
    """Weekdays claimed by other routine templates"""
    occupied_days: List[Weekday]
    conflicting_days: List[Weekday] = []
    claimed_by: Dict[str, List[str]] = {}


class StateCreate(BaseModel):
    """Request for creating a state"""
    title: str
    items: List[str] = []
    date: Optional[datetime] = None


class StateUpdate(BaseModel):
    """Request for updating a state"""
    title: Optional[str] = None
    is_completed: Optional[bool] = None


class StateReorder(BaseModel):
    """New order of a day's states, as ids"""
    state_ids: List[str]


class ChecklistItemCreate(BaseModel):
    """Request for adding a checklist item"""
    title: str


class StreamStatus(BaseModel):
    """Current rolling window of the state stream"""
    stream_start_time: datetime
    stream_end_time: datetime
    stream_dates: List[datetime]
    last_refresh_time: datetime
    needs_refresh: bool
    window_hours: int


class RefreshResult(BaseModel):
    """Outcome of a stream refresh"""
    refreshed: bool
    created_states: int
