"""REST endpoints exposing auto select decisions and settings."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, ValidationError

from pickban.models.auto_select import AutoSelectSettings
from pickban.services.auto_select_state import AutoSelectState

router = APIRouter(prefix="/api/auto-select", tags=["auto-select"])


class ActionRefResponse(BaseModel):
    id: int
    is_in_progress: bool
    completed: bool


class UpcomingActionResponse(BaseModel):
    champion_id: int
    is_acting_now: bool
    action: ActionRefResponse


class PendingGrabResponse(BaseModel):
    champion_id: int
    will_grab_at: float


class UpcomingResponse(BaseModel):
    pick: Optional[UpcomingActionResponse] = None
    ban: Optional[UpcomingActionResponse] = None
    grab: Optional[PendingGrabResponse] = None


def _get_state(request: Request) -> AutoSelectState:
    state = getattr(request.app.state, "auto_select", None)
    if state is None:
        raise HTTPException(status_code=503, detail="Auto select not initialized")
    return state


@router.get("/upcoming", response_model=UpcomingResponse)
async def get_upcoming(request: Request):
    """Current pick, ban and grab decisions."""
    return _get_state(request).snapshot_dict()


@router.get("/settings")
async def get_settings(request: Request):
    return _get_state(request).settings.model_dump()


@router.put("/settings")
async def put_settings(request: Request, body: dict):
    """Replace the settings as a whole. Omitted options take their defaults."""
    state = _get_state(request)
    try:
        settings = AutoSelectSettings.model_validate(body)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False)) from e
    state.replace_settings(settings)
    return settings.model_dump()


@router.patch("/settings")
async def patch_settings(request: Request, body: dict):
    """Change some options, keeping the rest."""
    state = _get_state(request)
    try:
        settings = state.update_settings(body)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False)) from e
    return settings.model_dump()
