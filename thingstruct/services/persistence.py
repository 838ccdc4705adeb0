"""
MongoDB Persistence for the entity store

Checklist items are embedded in their owner's document. Routine templates
and routine items reference their members by id.
"""
from typing import Dict, List
import logging

from ..database import (
    get_state_templates_collection,
    get_routine_templates_collection,
    get_state_items_collection,
    get_routine_items_collection,
)
from ..models import RoutineItem, RoutineTemplate, StateItem, StateTemplate
from .store import InMemoryStore

logger = logging.getLogger(__name__)


# ============ DOCUMENTS ============

def state_template_document(template: StateTemplate) -> dict:
    return template.model_dump()


def routine_template_document(template: RoutineTemplate) -> dict:
    document = template.model_dump(exclude={"state_templates"})
    document["state_template_ids"] = [t.id for t in template.state_templates]
    return document


def state_item_document(state: StateItem) -> dict:
    return state.model_dump()


def routine_item_document(routine: RoutineItem) -> dict:
    document = routine.model_dump(exclude={"state_items"})
    document["state_item_ids"] = [s.id for s in routine.state_items]
    return document


def _insert_with_checklist(store: InMemoryStore, owner) -> None:
    store.insert(owner)
    for item in owner.checklist_items:
        store.insert(item)


def hydrate_store(
    store: InMemoryStore,
    state_templates: List[dict],
    routine_templates: List[dict],
    state_items: List[dict],
    routine_items: List[dict],
) -> None:
    """Fill the arena from raw documents, resolving id references"""
    templates_by_id: Dict[str, StateTemplate] = {}
    for document in state_templates:
        template = StateTemplate(**document)
        templates_by_id[template.id] = template
        _insert_with_checklist(store, template)

    for document in routine_templates:
        document = dict(document)
        ids = document.pop("state_template_ids", [])
        routine_template = RoutineTemplate(**document)
        # unknown ids belong to deleted state templates
        routine_template.state_templates = [templates_by_id[i] for i in ids if i in templates_by_id]
        store.insert(routine_template)

    states_by_id: Dict[str, StateItem] = {}
    for document in state_items:
        state = StateItem(**document)
        states_by_id[state.id] = state
        _insert_with_checklist(store, state)

    for document in routine_items:
        document = dict(document)
        ids = document.pop("state_item_ids", [])
        routine = RoutineItem(**document)
        routine.state_items = [states_by_id[i] for i in ids if i in states_by_id]
        store.insert(routine)


# ============ LOAD / SAVE ============

_COLLECTIONS = (
    (StateTemplate, get_state_templates_collection, state_template_document),
    (RoutineTemplate, get_routine_templates_collection, routine_template_document),
    (StateItem, get_state_items_collection, state_item_document),
    (RoutineItem, get_routine_items_collection, routine_item_document),
)


async def load_store(store: InMemoryStore) -> None:
    """Read every collection into the arena"""
    raw = []
    for _, get_collection, _ in _COLLECTIONS:
        cursor = get_collection().find({})
        raw.append(await cursor.to_list(None))

    hydrate_store(store, *raw)
    logger.info(
        f"Loaded {len(raw[0])} state templates, {len(raw[1])} routine templates, "
        f"{len(raw[2])} states, {len(raw[3])} routines"
    )


async def save_store(store: InMemoryStore) -> None:
    """Upsert every entity by id and drop documents no longer in the arena"""
    for kind, get_collection, to_document in _COLLECTIONS:
        collection = get_collection()
        entities = store.query(kind)
        for entity in entities:
            await collection.replace_one({"id": entity.id}, to_document(entity), upsert=True)
        await collection.delete_many({"id": {"$nin": [e.id for e in entities]}})

    logger.debug("Store saved to MongoDB")
