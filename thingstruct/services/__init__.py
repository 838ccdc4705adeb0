# Business Logic Services
from .store import EntityStore, InMemoryStore
from .occupancy import occupied_days, conflicting_days, occupancy_map
from .stream import StreamManager, STREAM_WINDOW_HOURS
from .persistence import load_store, save_store, hydrate_store
from .workspace import Workspace, init_workspace, get_workspace, observed_workspace

__all__ = [
    # Store
    "EntityStore",
    "InMemoryStore",
    # Occupancy
    "occupied_days",
    "conflicting_days",
    "occupancy_map",
    # Stream
    "StreamManager",
    "STREAM_WINDOW_HOURS",
    # Persistence
    "load_store",
    "save_store",
    "hydrate_store",
    # Workspace
    "Workspace",
    "init_workspace",
    "get_workspace",
    "observed_workspace",
]
