"""Player endpoints — load canvases, follow navigation links, tear down."""

from fastapi import APIRouter, Depends, HTTPException
from typing import Optional
import logging

from app.models import NavigationEvent, PlayerView, RenderRequest
from app.routers.manifest import get_manifest
from app.services import time_range
from app.services.hash_handler import parse_navigation
from app.services.manifest import CanvasNotFound, Manifest
from app.services.manifest_resolver import NoPlayableResource
from app.services.player import PlayerController

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/player", tags=["player"])

# One player per service, like the single player region on a page
_controller: Optional[PlayerController] = None


def get_controller(manifest: Manifest = Depends(get_manifest)) -> PlayerController:
    global _controller
    if _controller is None or _controller.manifest is not manifest:
        if _controller is not None:
            _controller.teardown()
        _controller = PlayerController(manifest)
    return _controller


def _view(controller: PlayerController) -> PlayerView:
    player = controller.player
    return PlayerView(
        session=controller.session,
        markup=controller.region.markup,
        current_time=getattr(player, "current_time", None),
        paused=getattr(player, "paused", None),
    )


@router.get("", response_model=PlayerView)
async def get_player(controller: PlayerController = Depends(get_controller)):
    """Current session and mounted player markup."""
    return _view(controller)


@router.post("/render", response_model=PlayerView)
async def render(request: RenderRequest, controller: PlayerController = Depends(get_controller)):
    """Load a canvas into the player, replacing the current one."""
    try:
        controller.render(request.canvas_index, request.quality)
    except (CanvasNotFound, NoPlayableResource) as e:
        logger.warning(f"Render failed for canvas {request.canvas_index}: {e}")
        raise HTTPException(status_code=404, detail=str(e))
    return _view(controller)


@router.post("/navigate", response_model=PlayerView)
async def navigate(event: NavigationEvent, controller: PlayerController = Depends(get_controller)):
    """
    Follow a navigation link.

    Canvas and quality come from the request body when given, otherwise from
    the link's /canvas/{n}/ and /quality/{label}/ segments.
    """
    parsed = parse_navigation(event.url)
    event = NavigationEvent(
        url=event.url,
        canvas_index=event.canvas_index if event.canvas_index is not None else parsed.canvas_index,
        quality=event.quality or parsed.quality,
    )
    try:
        controller.navigate(event)
    except time_range.MalformedTimeFragment as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (CanvasNotFound, NoPlayableResource) as e:
        logger.warning(f"Navigation to {event.url} failed: {e}")
        raise HTTPException(status_code=404, detail=str(e))
    return _view(controller)


@router.post("/play", response_model=PlayerView)
async def play(controller: PlayerController = Depends(get_controller)):
    """Start playback. Does nothing when no player is active."""
    controller.play()
    return _view(controller)


@router.post("/pause", response_model=PlayerView)
async def pause(controller: PlayerController = Depends(get_controller)):
    """Pause playback if the player is playing."""
    controller.pause()
    return _view(controller)


@router.delete("", response_model=PlayerView)
async def teardown(controller: PlayerController = Depends(get_controller)):
    """Destroy the player. Safe to call repeatedly."""
    controller.teardown()
    return _view(controller)
