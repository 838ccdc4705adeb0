# Pydantic Models
from .weekday import Weekday, weekdays_to_list, weekdays_from_list
from .checklist import ChecklistItem, ChecklistOwnerMixin
from .items import StateItem, RoutineItem
from .templates import StateTemplate, RoutineTemplate
from .requests import (
    StateTemplateCreate, StateTemplateUpdate,
    RoutineTemplateCreate, RoutineTemplateUpdate, RoutineTemplateSaved, OccupancyResponse,
    StateCreate, StateUpdate, StateReorder, ChecklistItemCreate,
    StreamStatus, RefreshResult,
)

__all__ = [
    # Weekday
    "Weekday", "weekdays_to_list", "weekdays_from_list",
    # Checklist
    "ChecklistItem", "ChecklistOwnerMixin",
    # Live entities
    "StateItem", "RoutineItem",
    # Templates
    "StateTemplate", "RoutineTemplate",
    # Requests
    "StateTemplateCreate", "StateTemplateUpdate",
    "RoutineTemplateCreate", "RoutineTemplateUpdate", "RoutineTemplateSaved", "OccupancyResponse",
    "StateCreate", "StateUpdate", "StateReorder", "ChecklistItemCreate",
    "StreamStatus", "RefreshResult",
]
