'''
Editor registry.
1- EditorRegistry: holds one AvailabilityController per open editor (e.g. per browser tab)
2- create_editor_registry / dispose_editor_registry: called by the app's lifespan
3- get_editor_registry: Dependency handing the registry to the routes
'''
from typing import Optional
from uuid import UUID, uuid4

from ..common.exceptions import EditorNotFoundError
from ..common.logger import log
from .availability_client import AvailabilityClient
from .availability_controller import AvailabilityController


class EditorRegistry:
    """
    Keeps editors isolated from each other: each has its own grid, drag
    state and selection, so two tabs on the same nurse never share state.
    """
    def __init__(self, client: Optional[AvailabilityClient] = None):
        self.client = client or AvailabilityClient()
        self._editors: dict[UUID, AvailabilityController] = {}

    def open(self) -> tuple[UUID, AvailabilityController]:
        editor_id = uuid4()
        self._editors[editor_id] = AvailabilityController(self.client)
        log.info(f"Opened availability editor {editor_id} ({len(self._editors)} open).")
        return editor_id, self._editors[editor_id]

    def get(self, editor_id: UUID) -> AvailabilityController:
        controller = self._editors.get(editor_id)
        if controller is None:
            log.warning(f"Tried to access non-existing editor: {editor_id}")
            raise EditorNotFoundError(f"Editor {editor_id} not found.")
        return controller

    def close(self, editor_id: UUID) -> None:
        if self._editors.pop(editor_id, None) is None:
            log.warning(f"Tried to close non-existing editor: {editor_id}")
            raise EditorNotFoundError(f"Editor {editor_id} not found.")
        log.info(f"Closed availability editor {editor_id}.")

    def close_all(self) -> None:
        self._editors.clear()

    def __len__(self) -> int:
        return len(self._editors)


# Created by the app's lifespan.
registry: EditorRegistry | None = None

def create_editor_registry(client: Optional[AvailabilityClient] = None) -> EditorRegistry:
    """
    Creates the registry.
    This is called by the app's lifespan event.
    """
    global registry
    registry = EditorRegistry(client)
    log.info(f"Editor registry created for workforce API at {registry.client.base_url}.")
    return registry

def dispose_editor_registry() -> None:
    """Drops every open editor. Called by the app's lifespan."""
    global registry
    if registry:
        registry.close_all()
        log.info("Editor registry disposed.")
    registry = None

def get_editor_registry() -> EditorRegistry:
    """
    FastAPI dependency that provides the shared editor registry.
    """
    if registry is None:
        log.error("Editor registry is not initialized. App lifespan may not have run.")
        raise RuntimeError("Editor registry is not available.")
    return registry
