"""
Checklist Models
"""
from pydantic import BaseModel, Field
from typing import ClassVar, Iterable, List, Optional, Tuple, TYPE_CHECKING
from datetime import datetime
import uuid

if TYPE_CHECKING:
    from ..services.store import EntityStore


class ChecklistItem(BaseModel):
    """Single checklist item, owned by a state or a state template"""
    cascade_relationships: ClassVar[Tuple[str, ...]] = ()
    nullify_relationships: ClassVar[Tuple[str, ...]] = ()

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str
    is_completed: bool = False
    completed_date: Optional[datetime] = None
    order: int = 0


class ChecklistOwnerMixin:
    """Editing helpers shared by everything that owns `checklist_items`.

    Orders stay dense (0..N-1) after every insert and delete.
    """

    def sorted_checklist(self) -> List[ChecklistItem]:
        return sorted(self.checklist_items, key=lambda item: item.order)

    def find_checklist_item(self, item_id: str) -> Optional[ChecklistItem]:
        for item in self.checklist_items:
            if item.id == item_id:
                return item
        return None

    def renumber_checklist(self) -> None:
        for index, item in enumerate(self.sorted_checklist()):
            item.order = index

    def add_checklist_item(self, title: str, store: "EntityStore") -> ChecklistItem:
        """Append a new item at the end of the checklist"""
        item = ChecklistItem(title=title, order=len(self.checklist_items))
        store.insert(item)
        self.checklist_items.append(item)
        return item

    def remove_checklist_item(self, item_id: str, store: "EntityStore") -> Optional[ChecklistItem]:
        """Delete an item and close the gap it leaves in the ordering"""
        item = self.find_checklist_item(item_id)
        if item is None:
            return None

        self.checklist_items = [i for i in self.checklist_items if i.id != item_id]
        store.delete(item)
        self.renumber_checklist()
        return item

    def replace_checklist(self, titles: Iterable[str], store: "EntityStore") -> List[ChecklistItem]:
        """Swap the whole checklist for fresh items built from `titles`"""
        for old_item in list(self.checklist_items):
            store.delete(old_item)
        self.checklist_items = []

        for title in titles:
            title = title.strip()
            if title:
                self.add_checklist_item(title, store)
        return self.checklist_items
