"""Manifest endpoints — structure navigation, item resolution and quality menus."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse
from typing import Optional
import logging

from app.config import settings
from app.models import LinkedStructure, QualityChoices, ResolvedItem
from app.services.manifest import CanvasNotFound, Manifest, load_manifest
from app.services.manifest_resolver import NoPlayableResource, resolve_dimensions, resolve_item
from app.services.markup import render_structure
from app.services.quality_selector import build_choices, enumerate_choices
from app.services.structure import build_structure, link_structure

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/manifest", tags=["manifest"])

# Loaded once from settings.manifest_path
_manifest: Optional[Manifest] = None


def get_manifest() -> Manifest:
    """Return the configured manifest, loading it on first use."""
    global _manifest
    if _manifest is None:
        try:
            _manifest = load_manifest(settings.manifest_path)
        except (OSError, ValueError) as e:
            logger.error(f"Could not load manifest {settings.manifest_path}: {type(e).__name__}: {e}")
            raise HTTPException(status_code=503, detail=f"Manifest not available: {settings.manifest_path}")
    return _manifest


def get_linked_structure(manifest: Manifest) -> LinkedStructure:
    """Build the navigation tree fresh and derive every implicit node's link."""
    nodes = build_structure(manifest, base_url=settings.base_url)
    return link_structure(nodes)


def _canvas(manifest: Manifest, index: int) -> dict:
    try:
        return manifest.canvas(index)
    except CanvasNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("", summary="Manifest overview")
async def manifest_info(manifest: Manifest = Depends(get_manifest)):
    """Label and canvas count of the loaded manifest."""
    return {
        "label": manifest.label,
        "canvas_count": len(manifest.canvases),
        "structure_count": len(manifest.structures),
    }


@router.get("/structure", response_model=LinkedStructure)
async def get_structure(manifest: Manifest = Depends(get_manifest)):
    """
    Table of contents with derived links.

    Nodes whose range could not be derived keep their previous link and are
    listed under `failures`.
    """
    return get_linked_structure(manifest)


@router.get("/structure.html", response_class=HTMLResponse)
async def get_structure_html(manifest: Manifest = Depends(get_manifest)):
    """Table of contents as a nested list of links."""
    return render_structure(get_linked_structure(manifest).nodes)


@router.get("/canvases/{index}/item", response_model=ResolvedItem)
async def get_item(
    index: int,
    quality: str = settings.default_quality,
    manifest: Manifest = Depends(get_manifest),
):
    """
    Resolve the playable resource for a canvas.

    - **quality**: Requested label, e.g. "Low", "Medium", "High". Falls back
      to the default quality, then to the first alternate.
    """
    canvas = _canvas(manifest, index)
    try:
        item = resolve_item(manifest, canvas, quality, default_quality=settings.default_quality)
    except NoPlayableResource as e:
        raise HTTPException(status_code=404, detail=str(e))

    return ResolvedItem(
        canvas_index=index,
        item=item,
        dimensions=resolve_dimensions(manifest, canvas, item),
        requested_quality=quality,
    )


@router.get("/canvases/{index}/qualities", response_model=QualityChoices)
async def get_qualities(
    index: int,
    current: Optional[str] = None,
    manifest: Manifest = Depends(get_manifest),
):
    """Quality labels offered by a canvas, in manifest order."""
    canvas = _canvas(manifest, index)
    return build_choices(enumerate_choices(manifest, canvas), current)
