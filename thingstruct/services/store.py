"""
Entity Store

Abstract object store plus an in-memory arena keyed by identity. Owned
children are deleted together with their owner, synchronously.
"""
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar
import logging

from pydantic import BaseModel

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=BaseModel)


def _kind(entity_or_class: Any) -> str:
    cls = entity_or_class if isinstance(entity_or_class, type) else type(entity_or_class)
    return cls.__name__


class EntityStore(ABC):
    """Minimal store interface the templates and the stream manager rely on"""

    @abstractmethod
    def insert(self, entity: BaseModel) -> None:
        ...

    @abstractmethod
    def delete(self, entity: BaseModel) -> int:
        """Delete an entity and everything it owns; returns removed count"""

    @abstractmethod
    def get(self, kind: Type[E], entity_id: str) -> Optional[E]:
        ...

    @abstractmethod
    def query(
        self,
        kind: Type[E],
        sort_by: Optional[str] = None,
        where: Optional[Callable[[E], bool]] = None,
    ) -> List[E]:
        ...


class InMemoryStore(EntityStore):
    """Arena-style store: `{kind name: {id: entity}}`"""

    def __init__(self):
        self._arena: Dict[str, Dict[str, BaseModel]] = defaultdict(dict)

    def insert(self, entity: BaseModel) -> None:
        self._arena[_kind(entity)][entity.id] = entity
        logger.debug(f"Inserted {_kind(entity)} {entity.id}")

    def delete(self, entity: BaseModel) -> int:
        removed = self._cascade_delete(entity)
        self._detach(entity.id)
        logger.debug(f"Deleted {_kind(entity)} {entity.id} ({removed} entities removed)")
        return removed

    def _cascade_delete(self, entity: BaseModel) -> int:
        removed = 0
        for relationship in getattr(entity, "cascade_relationships", ()):
            for child in list(getattr(entity, relationship)):
                removed += self._cascade_delete(child)

        if self._arena[_kind(entity)].pop(entity.id, None) is not None:
            removed += 1
        return removed

    def _detach(self, entity_id: str) -> None:
        """Drop references to a deleted entity from every relationship list"""
        for bucket in self._arena.values():
            for owner in bucket.values():
                relationships = (
                    getattr(owner, "cascade_relationships", ())
                    + getattr(owner, "nullify_relationships", ())
                )
                for relationship in relationships:
                    children = getattr(owner, relationship)
                    if any(child.id == entity_id for child in children):
                        setattr(owner, relationship, [c for c in children if c.id != entity_id])

    def get(self, kind: Type[E], entity_id: str) -> Optional[E]:
        return self._arena[_kind(kind)].get(entity_id)

    def query(
        self,
        kind: Type[E],
        sort_by: Optional[str] = None,
        where: Optional[Callable[[E], bool]] = None,
    ) -> List[E]:
        """Snapshot of one kind, optionally filtered and sorted by a field"""
        entities = list(self._arena[_kind(kind)].values())
        if where is not None:
            entities = [e for e in entities if where(e)]
        if sort_by is not None:
            entities.sort(key=lambda e: getattr(e, sort_by))
        return entities

    def contains(self, entity: BaseModel) -> bool:
        return entity.id in self._arena[_kind(entity)]

    def count(self, kind: Type[BaseModel]) -> int:
        return len(self._arena[_kind(kind)])

    def clear(self) -> None:
        self._arena.clear()
