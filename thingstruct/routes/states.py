"""
State Routes (daily states, their checklists and routines)
"""
from fastapi import APIRouter, Depends, HTTPException
from datetime import datetime
from typing import List, Optional
import logging

from ..dates import start_of_day
from ..models import (
    StateItem, StateCreate, StateUpdate, StateReorder,
    ChecklistItemCreate, RoutineItem,
)
from ..services.stream import StreamManager
from ..services.workspace import Workspace, get_workspace, observed_workspace

logger = logging.getLogger(__name__)
router = APIRouter(tags=["States"])


def _get_state(state_id: str) -> StateItem:
    state = get_workspace().store.get(StateItem, state_id)
    if state is None:
        raise HTTPException(status_code=404, detail="State not found")
    return state


def _day(date: Optional[datetime]) -> datetime:
    return start_of_day(date) if date is not None else get_workspace().stream.today()


@router.get("/states", response_model=List[StateItem])
async def get_states(date: Optional[datetime] = None, ws: Workspace = Depends(observed_workspace)):
    """Получить состояния за день (по умолчанию сегодня)"""
    return ws.states_for_day(_day(date))


@router.get("/states/current", response_model=Optional[StateItem])
async def get_current_state(ws: Workspace = Depends(observed_workspace)):
    """Первое незавершённое состояние сегодня"""
    return StreamManager.current_state(ws.states(), ws.stream.today())


@router.post("/states", response_model=StateItem)
async def create_state(body: StateCreate, ws: Workspace = Depends(observed_workspace)):
    """Создать состояние в конце списка дня"""
    day = _day(body.date)

    state = StateItem(title=body.title.strip(), date=day, order=StreamManager.next_order(ws.states(), day))
    ws.store.insert(state)
    state.replace_checklist(body.items, ws.store)

    await ws.persist()
    return state


@router.put("/states/reorder", response_model=List[StateItem])
async def reorder_states(body: StateReorder, ws: Workspace = Depends(observed_workspace)):
    """Задать новый порядок состояний одного дня.

    Состояния дня, не перечисленные в запросе, идут следом в прежнем порядке.
    """
    if len(set(body.state_ids)) != len(body.state_ids):
        raise HTTPException(status_code=422, detail="Duplicate state ids")

    listed = [_get_state(state_id) for state_id in body.state_ids]
    if not listed:
        return ws.states_for_day()

    day = listed[0].date
    if any(state.date != day for state in listed):
        raise HTTPException(status_code=422, detail="States belong to different days")

    rest = [state for state in ws.states_for_day(day) if state.id not in body.state_ids]
    states = listed + rest
    for index, state in enumerate(states):
        state.order = index

    await ws.persist()
    return states


@router.put("/states/{state_id}", response_model=StateItem)
async def update_state(state_id: str, body: StateUpdate):
    """Обновить состояние"""
    ws = get_workspace()
    state = _get_state(state_id)

    if body.title is not None and body.title.strip():
        state.title = body.title.strip()
    if body.is_completed is not None:
        state.is_completed = body.is_completed

    await ws.persist()
    return state


@router.delete("/states/{state_id}")
async def delete_state(state_id: str):
    """Удалить состояние"""
    ws = get_workspace()
    ws.store.delete(_get_state(state_id))

    await ws.persist()
    return {"message": "State deleted successfully"}


# ============ CHECKLIST ============

@router.post("/states/{state_id}/checklist", response_model=StateItem)
async def add_checklist_item(state_id: str, body: ChecklistItemCreate):
    """Добавить элемент чеклиста"""
    ws = get_workspace()
    state = _get_state(state_id)
    state.add_checklist_item(body.title.strip(), ws.store)

    await ws.persist()
    return state


@router.put("/states/{state_id}/checklist/{item_id}", response_model=StateItem)
async def toggle_checklist_item(state_id: str, item_id: str):
    """Переключить статус элемента чеклиста"""
    ws = get_workspace()
    state = _get_state(state_id)

    if state.toggle_checklist_item(item_id, now=ws.stream.now()) is None:
        raise HTTPException(status_code=404, detail="Checklist item not found")

    await ws.persist()
    return state


@router.delete("/states/{state_id}/checklist/{item_id}", response_model=StateItem)
async def delete_checklist_item(state_id: str, item_id: str):
    """Удалить элемент чеклиста"""
    ws = get_workspace()
    state = _get_state(state_id)

    if state.remove_checklist_item(item_id, ws.store) is None:
        raise HTTPException(status_code=404, detail="Checklist item not found")

    await ws.persist()
    return state


# ============ ROUTINES ============

@router.get("/routines", response_model=List[RoutineItem])
async def get_routines(date: Optional[datetime] = None, ws: Workspace = Depends(observed_workspace)):
    """Получить распорядки за день"""
    return ws.routines_for_day(_day(date))


@router.delete("/routines/{routine_id}")
async def delete_routine(routine_id: str):
    """Удалить распорядок вместе с его состояниями"""
    ws = get_workspace()
    routine = ws.store.get(RoutineItem, routine_id)
    if routine is None:
        raise HTTPException(status_code=404, detail="Routine not found")

    removed = ws.store.delete(routine)
    logger.info(f"Deleted routine {routine_id} ({removed} entities)")

    await ws.persist()
    return {"message": "Routine deleted successfully"}
