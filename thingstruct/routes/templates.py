"""
Template Routes (state templates and routine templates)
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional
import logging

from ..models import (
    StateTemplate, StateTemplateCreate, StateTemplateUpdate,
    RoutineTemplate, RoutineTemplateCreate, RoutineTemplateUpdate, RoutineTemplateSaved,
    OccupancyResponse, StateItem, RoutineItem, weekdays_from_list,
)
from ..services.occupancy import conflicting_days, occupied_days, occupancy_map
from ..services.stream import StreamManager
from ..services.workspace import Workspace, get_workspace, observed_workspace

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Templates"])


def _get_state_template(template_id: str) -> StateTemplate:
    template = get_workspace().store.get(StateTemplate, template_id)
    if template is None:
        raise HTTPException(status_code=404, detail="State template not found")
    return template


def _get_routine_template(template_id: str) -> RoutineTemplate:
    template = get_workspace().store.get(RoutineTemplate, template_id)
    if template is None:
        raise HTTPException(status_code=404, detail="Routine template not found")
    return template


def _resolve_state_templates(ids: List[str]) -> List[StateTemplate]:
    return [_get_state_template(template_id) for template_id in ids]


def _with_conflicts(template: RoutineTemplate) -> RoutineTemplateSaved:
    ws = get_workspace()
    conflicts = conflicting_days(template.repeat_days, ws.routine_templates(), excluding=template)
    if conflicts:
        names = ", ".join(day.short_name for day in sorted(conflicts))
        logger.warning(f"Routine template '{template.title}' shares recurrence days with others: {names}")
    return RoutineTemplateSaved(template=template, conflicting_days=sorted(conflicts))


# ============ STATE TEMPLATES ============

@router.get("/state-templates", response_model=List[StateTemplate])
async def get_state_templates():
    """Получить все шаблоны состояний"""
    return get_workspace().state_templates()


@router.post("/state-templates", response_model=StateTemplate)
async def create_state_template(body: StateTemplateCreate):
    """Создать шаблон состояния"""
    ws = get_workspace()
    template = StateTemplate(title=body.title.strip())
    ws.store.insert(template)
    template.replace_checklist(body.items, ws.store)

    await ws.persist()
    return template


@router.put("/state-templates/{template_id}", response_model=StateTemplate)
async def update_state_template(template_id: str, body: StateTemplateUpdate):
    """Обновить шаблон состояния"""
    ws = get_workspace()
    template = _get_state_template(template_id)

    if body.title is not None and body.title.strip():
        template.title = body.title.strip()
    if body.items is not None:
        template.replace_checklist(body.items, ws.store)

    await ws.persist()
    return template


@router.delete("/state-templates/{template_id}")
async def delete_state_template(template_id: str):
    """Удалить шаблон состояния"""
    ws = get_workspace()
    ws.store.delete(_get_state_template(template_id))

    await ws.persist()
    return {"message": "State template deleted successfully"}


@router.post("/state-templates/{template_id}/instantiate", response_model=StateItem)
async def instantiate_state_template(template_id: str, ws: Workspace = Depends(observed_workspace)):
    """Создать состояние из шаблона на сегодня (в конец списка)"""
    template = _get_state_template(template_id)
    today = ws.stream.today()

    state = template.create_state(today, StreamManager.next_order(ws.states(), today), ws.store)

    await ws.persist()
    return state


# ============ ROUTINE TEMPLATES ============

@router.get("/routine-templates", response_model=List[RoutineTemplate])
async def get_routine_templates():
    """Получить все шаблоны распорядка"""
    return get_workspace().routine_templates()


@router.get("/routine-templates/occupancy", response_model=OccupancyResponse)
async def get_occupancy(
    excluding: Optional[str] = None,
    days: List[int] = Query(default=[]),
):
    """Дни недели, занятые другими шаблонами"""
    templates = get_workspace().routine_templates()
    claims = occupancy_map(templates, excluding=excluding)

    return OccupancyResponse(
        occupied_days=sorted(occupied_days(templates, excluding=excluding)),
        conflicting_days=sorted(conflicting_days(weekdays_from_list(days), templates, excluding=excluding)),
        claimed_by={day.short_name: titles for day, titles in claims.items()},
    )


@router.post("/routine-templates", response_model=RoutineTemplateSaved)
async def create_routine_template(body: RoutineTemplateCreate):
    """Создать шаблон распорядка"""
    ws = get_workspace()
    template = RoutineTemplate(
        title=body.title.strip(),
        repeat_days=set(body.repeat_days),
        state_templates=_resolve_state_templates(body.state_template_ids),
    )
    ws.store.insert(template)

    await ws.persist()
    return _with_conflicts(template)


@router.put("/routine-templates/{template_id}", response_model=RoutineTemplateSaved)
async def update_routine_template(template_id: str, body: RoutineTemplateUpdate):
    """Обновить шаблон распорядка"""
    ws = get_workspace()
    template = _get_routine_template(template_id)

    if body.title is not None and body.title.strip():
        template.title = body.title.strip()
    if body.repeat_days is not None:
        template.repeat_days = set(body.repeat_days)
    if body.state_template_ids is not None:
        template.state_templates = _resolve_state_templates(body.state_template_ids)

    await ws.persist()
    return _with_conflicts(template)


@router.delete("/routine-templates/{template_id}")
async def delete_routine_template(template_id: str):
    """Удалить шаблон распорядка"""
    ws = get_workspace()
    ws.store.delete(_get_routine_template(template_id))

    await ws.persist()
    return {"message": "Routine template deleted successfully"}


@router.post("/routine-templates/{template_id}/apply", response_model=List[StateItem])
async def apply_routine_template(template_id: str, ws: Workspace = Depends(observed_workspace)):
    """Вставить состояния шаблона после текущего состояния"""
    template = _get_routine_template(template_id)
    today = ws.stream.today()

    today_states = ws.states_for_day(today)
    current = StreamManager.current_state(today_states, today)
    new_states = ws.stream.apply_template(template, current, today_states, ws.store)

    await ws.persist()
    return new_states


@router.post("/routine-templates/{template_id}/routine", response_model=RoutineItem)
async def create_routine(template_id: str, ws: Workspace = Depends(observed_workspace)):
    """Создать распорядок на сегодня из шаблона"""
    template = _get_routine_template(template_id)

    routine = template.create_routine(ws.stream.today(), ws.store)
    logger.info(f"Created routine '{routine.title}' with {routine.total_state_count} states")

    await ws.persist()
    return routine
