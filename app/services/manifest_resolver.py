"""Resolve which concrete resource a canvas plays at a given quality."""

from typing import Any, Dict, Optional

from app.models import ContentItem, Dimensions, MediaKind, SubtitleRef
from app.services.manifest import Manifest, label_text

DEFAULT_QUALITY = "Medium"


class NoPlayableResource(ValueError):
    """Canvas has no audio or video alternates."""


def resolve_item(
    manifest: Manifest,
    canvas: Dict[str, Any],
    quality: str,
    default_quality: str = DEFAULT_QUALITY,
) -> ContentItem:
    """
    Pick the alternate for the requested quality.

    Labels match exactly (case-sensitive). Without a match the default
    quality is used if the canvas offers it, otherwise the first alternate
    in manifest order.
    """
    alternates = manifest.alternates(canvas)
    if not alternates:
        raise NoPlayableResource(f"No playable resource for canvas {canvas.get('id', '?')}")

    by_label = {}
    for alternate in alternates:
        by_label.setdefault(label_text(alternate.get("label")), alternate)

    chosen = by_label.get(quality) or by_label.get(default_quality) or alternates[0]

    return ContentItem(
        id=chosen["id"],
        type=MediaKind(manifest.media_type(chosen)),
        label=label_text(chosen.get("label")),
        subtitle=resolve_subtitle(manifest, canvas),
    )


def resolve_dimensions(manifest: Manifest, canvas: Dict[str, Any], item: ContentItem) -> Dimensions:
    """Player size for an item. Audio has no intrinsic size and always gets 0x0."""
    if item.type is MediaKind.AUDIO:
        return Dimensions(width=0, height=0)
    return Dimensions(**manifest.dimensions(canvas, item.id))


def resolve_subtitle(manifest: Manifest, canvas: Dict[str, Any]) -> Optional[SubtitleRef]:
    """First text track attached to the canvas, if any."""
    tracks = manifest.subtitles(canvas)
    if not tracks:
        return None
    track = tracks[0]
    return SubtitleRef(
        id=track["id"],
        language=track.get("language"),
        format=track.get("format"),
    )
