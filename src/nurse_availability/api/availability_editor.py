'''
API endpoints driving the weekly nurse availability editor.
'''
from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from ..common.exceptions import (
    AvailabilityFetchError,
    EditorNotFoundError,
    GridNotLoadedError,
    InvalidSlotError,
    NoNurseSelectedError,
    NurseAvailabilityError,
)
from ..common.logger import log
from ..models import availability as availability_models
from ..services.availability_controller import AvailabilityController
from ..services.editor_registry import EditorRegistry, get_editor_registry


class AvailabilityEditorAPI:
    """
    A class to encapsulate the endpoints of the availability editor.
    Every editing endpoint answers with the editor's current view.
    """
    def __init__(self):
        self.router = APIRouter(
            prefix="/availability-editor",
            tags=["Availability Editor"]
        )
        self._register_routes()

    def _register_routes(self):
        """Registers all the API routes for this class."""
        view_model = availability_models.EditorView

        self.router.add_api_route(
                "/nurses",
                self.list_nurses,
                methods=["GET"],
                response_model=list[availability_models.NurseOption])

        self.router.add_api_route(
                "/",
                self.open_editor,
                methods=["POST"],
                status_code=status.HTTP_201_CREATED,
                response_model=view_model)

        self.router.add_api_route(
                "/{editor_id}",
                self.get_editor,
                methods=["GET"],
                response_model=view_model)

        self.router.add_api_route(
                "/{editor_id}",
                self.close_editor,
                methods=["DELETE"],
                status_code=status.HTTP_204_NO_CONTENT)

        self.router.add_api_route(
                "/{editor_id}/selection",
                self.update_selection,
                methods=["PUT"],
                response_model=view_model)

        self.router.add_api_route("/{editor_id}/week/next", self.next_week, methods=["POST"], response_model=view_model)
        self.router.add_api_route("/{editor_id}/week/previous", self.previous_week, methods=["POST"], response_model=view_model)
        self.router.add_api_route("/{editor_id}/week/apply", self.apply_to_week, methods=["POST"], response_model=view_model)
        self.router.add_api_route("/{editor_id}/week/clear", self.clear_week, methods=["POST"], response_model=view_model)
        self.router.add_api_route("/{editor_id}/week/copy-previous", self.copy_previous_week, methods=["POST"], response_model=view_model)

        self.router.add_api_route("/{editor_id}/cells/click", self.click_cell, methods=["POST"], response_model=view_model)

        self.router.add_api_route("/{editor_id}/pointer/down", self.pointer_down, methods=["POST"], response_model=view_model)
        self.router.add_api_route("/{editor_id}/pointer/enter", self.pointer_enter, methods=["POST"], response_model=view_model)
        self.router.add_api_route("/{editor_id}/pointer/up", self.pointer_up, methods=["POST"], response_model=view_model)
        self.router.add_api_route("/{editor_id}/pointer/leave", self.pointer_leave, methods=["POST"], response_model=view_model)

    # --- Helpers ---

    def _get_controller(self, registry: EditorRegistry, editor_id: UUID) -> AvailabilityController:
        try:
            return registry.get(editor_id)
        except EditorNotFoundError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Editor not found.")

    def _to_http_exception(self, e: NurseAvailabilityError) -> HTTPException:
        """Maps editor errors onto HTTP status codes."""
        if isinstance(e, InvalidSlotError):
            return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
        if isinstance(e, (NoNurseSelectedError, GridNotLoadedError)):
            return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
        log.error(f"Unhandled editor error: {e}", exc_info=True)
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unexpected editor error.")

    # --- Endpoints ---

    async def list_nurses(
        self,
        registry: Annotated[EditorRegistry, Depends(get_editor_registry)]
    ) -> list[Any]:
        """
        Lists the nurses for the editor's nurse selector.
        """
        try:
            return await registry.client.list_nurses()
        except AvailabilityFetchError as e:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    async def open_editor(
        self,
        registry: Annotated[EditorRegistry, Depends(get_editor_registry)]
    ) -> Any:
        """
        Opens a new, empty editor. Each open editor has its own grid.
        """
        editor_id, controller = registry.open()
        return controller.view(editor_id)

    async def get_editor(
        self,
        editor_id: UUID,
        registry: Annotated[EditorRegistry, Depends(get_editor_registry)]
    ) -> Any:
        return self._get_controller(registry, editor_id).view(editor_id)

    async def close_editor(
        self,
        editor_id: UUID,
        registry: Annotated[EditorRegistry, Depends(get_editor_registry)]
    ) -> None:
        try:
            registry.close(editor_id)
        except EditorNotFoundError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Editor not found.")

    async def update_selection(
        self,
        editor_id: UUID,
        selection: availability_models.SelectionUpdate,
        registry: Annotated[EditorRegistry, Depends(get_editor_registry)]
    ) -> Any:
        """
        Selects the nurse and week to edit and loads its availability.
        A failed load is reported through the view's state and error.
        """
        controller = self._get_controller(registry, editor_id)
        await controller.select_nurse(selection.nurse_id, week_of=selection.week_of)
        return controller.view(editor_id)

    async def next_week(
        self,
        editor_id: UUID,
        registry: Annotated[EditorRegistry, Depends(get_editor_registry)]
    ) -> Any:
        controller = self._get_controller(registry, editor_id)
        await controller.next_week()
        return controller.view(editor_id)

    async def previous_week(
        self,
        editor_id: UUID,
        registry: Annotated[EditorRegistry, Depends(get_editor_registry)]
    ) -> Any:
        controller = self._get_controller(registry, editor_id)
        await controller.previous_week()
        return controller.view(editor_id)

    async def apply_to_week(
        self,
        editor_id: UUID,
        update: availability_models.WeekStatusUpdate,
        registry: Annotated[EditorRegistry, Depends(get_editor_registry)]
    ) -> Any:
        """
        Sets every hour of the displayed week to one status.
        """
        controller = self._get_controller(registry, editor_id)
        try:
            await controller.apply_to_week(update.status)
        except NurseAvailabilityError as e:
            raise self._to_http_exception(e)
        return controller.view(editor_id)

    async def clear_week(
        self,
        editor_id: UUID,
        registry: Annotated[EditorRegistry, Depends(get_editor_registry)]
    ) -> Any:
        controller = self._get_controller(registry, editor_id)
        try:
            await controller.clear_week()
        except NurseAvailabilityError as e:
            raise self._to_http_exception(e)
        return controller.view(editor_id)

    async def copy_previous_week(
        self,
        editor_id: UUID,
        registry: Annotated[EditorRegistry, Depends(get_editor_registry)]
    ) -> Any:
        controller = self._get_controller(registry, editor_id)
        try:
            await controller.copy_previous_week()
        except NurseAvailabilityError as e:
            raise self._to_http_exception(e)
        return controller.view(editor_id)

    async def click_cell(
        self,
        editor_id: UUID,
        cell: availability_models.Cell,
        registry: Annotated[EditorRegistry, Depends(get_editor_registry)]
    ) -> Any:
        """
        A single click: cycles the cell's status and saves.
        """
        controller = self._get_controller(registry, editor_id)
        try:
            await controller.click(cell)
        except NurseAvailabilityError as e:
            raise self._to_http_exception(e)
        return controller.view(editor_id)

    async def pointer_down(
        self,
        editor_id: UUID,
        cell: availability_models.Cell,
        registry: Annotated[EditorRegistry, Depends(get_editor_registry)]
    ) -> Any:
        controller = self._get_controller(registry, editor_id)
        try:
            controller.pointer_down(cell)
        except NurseAvailabilityError as e:
            raise self._to_http_exception(e)
        return controller.view(editor_id)

    async def pointer_enter(
        self,
        editor_id: UUID,
        cell: availability_models.Cell,
        registry: Annotated[EditorRegistry, Depends(get_editor_registry)]
    ) -> Any:
        controller = self._get_controller(registry, editor_id)
        try:
            controller.pointer_enter(cell)
        except NurseAvailabilityError as e:
            raise self._to_http_exception(e)
        return controller.view(editor_id)

    async def pointer_up(
        self,
        editor_id: UUID,
        registry: Annotated[EditorRegistry, Depends(get_editor_registry)]
    ) -> Any:
        """
        Ends a drag. Several cells become unavailable; a single cell cycles.
        """
        controller = self._get_controller(registry, editor_id)
        try:
            await controller.pointer_up()
        except NurseAvailabilityError as e:
            raise self._to_http_exception(e)
        return controller.view(editor_id)

    async def pointer_leave(
        self,
        editor_id: UUID,
        registry: Annotated[EditorRegistry, Depends(get_editor_registry)]
    ) -> Any:
        """
        The pointer left the grid mid-drag: the gesture is dropped.
        """
        controller = self._get_controller(registry, editor_id)
        controller.pointer_leave_grid()
        return controller.view(editor_id)

# Instantiate the class and export its router
availability_editor_api = AvailabilityEditorAPI()
router = availability_editor_api.router
