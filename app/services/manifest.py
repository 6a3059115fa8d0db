"""
Manifest query interface.

Wraps an already-parsed IIIF Presentation 3 style manifest and answers the
few questions the navigator needs: which canvases exist, which quality
alternates a canvas offers, which text tracks it carries, its intrinsic
dimensions and the table-of-contents ranges. The manifest is never mutated.

A canvas looks like:

    {
        "id": "https://example.org/canvas/1",
        "type": "Canvas",
        "width": 640, "height": 480, "duration": 660,
        "items": [{"type": "AnnotationPage", "items": [{
            "type": "Annotation", "motivation": "painting",
            "body": {"type": "Choice", "items": [
                {"id": ".../high.mp4", "type": "Video", "label": {"en": ["High"]}},
                {"id": ".../low.mp4", "type": "Video", "label": {"en": ["Low"]}}
            ]}
        }]}],
        "annotations": [{"type": "AnnotationPage", "items": [{
            "motivation": "supplementing",
            "body": {"id": ".../captions.vtt", "type": "Text",
                     "format": "text/vtt", "language": "en"}
        }]}]
    }
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

# IIIF uses "Sound" where players talk about "Audio"
MEDIA_TYPE_ALIASES = {
    "Sound": "Audio",
    "Audio": "Audio",
    "Video": "Video",
}

SUBTITLE_FORMATS = ("text/vtt", "application/x-subrip", "text/srt")


class CanvasNotFound(LookupError):
    """No canvas at the requested position."""


def label_text(label: Union[str, Dict[str, List[str]], None], default: str = "") -> str:
    """
    Flatten a IIIF label to plain text.

    Accepts a plain string or a language map like {"en": ["High"]}; the first
    value of the first language wins.
    """
    if label is None:
        return default
    if isinstance(label, str):
        return label
    if isinstance(label, dict):
        for values in label.values():
            if isinstance(values, list) and values:
                return str(values[0])
            if isinstance(values, str):
                return values
    return default


class Manifest:
    """Read-only view over a manifest dict."""

    def __init__(self, data: Dict[str, Any]):
        self._data = data

    @property
    def label(self) -> str:
        return label_text(self._data.get("label"), default="Untitled")

    @property
    def canvases(self) -> List[Dict[str, Any]]:
        return list(self._data.get("items") or [])

    @property
    def structures(self) -> List[Dict[str, Any]]:
        return list(self._data.get("structures") or [])

    def canvas(self, index: int) -> Dict[str, Any]:
        canvases = self.canvases
        if index < 0 or index >= len(canvases):
            raise CanvasNotFound(f"Canvas {index} not found ({len(canvases)} canvases)")
        return canvases[index]

    def canvas_index(self, canvas_id: str) -> Optional[int]:
        """Position of the canvas with this id (media fragment ignored)."""
        bare_id = canvas_id.split("#", 1)[0]
        for i, canvas in enumerate(self.canvases):
            if canvas.get("id") == bare_id:
                return i
        return None

    def alternates(self, canvas: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Painting bodies of a canvas, in manifest order.

        A Choice body contributes each of its items; a plain body contributes
        itself. Bodies that are not audio or video are skipped.
        """
        alternates = []
        for body in self._painting_bodies(canvas):
            candidates = body.get("items", []) if body.get("type") == "Choice" else [body]
            for candidate in candidates:
                if candidate.get("type") in MEDIA_TYPE_ALIASES and candidate.get("id"):
                    alternates.append(candidate)
        return alternates

    def subtitles(self, canvas: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Text track bodies attached to a canvas, in manifest order."""
        tracks = []
        for page in canvas.get("annotations") or []:
            for annotation in page.get("items") or []:
                if annotation.get("motivation") not in ("supplementing", "subtitling"):
                    continue
                body = annotation.get("body") or {}
                if body.get("type") == "Text" or body.get("format") in SUBTITLE_FORMATS:
                    if body.get("id"):
                        tracks.append(body)
        return tracks

    def dimensions(self, canvas: Dict[str, Any], item_id: str) -> Dict[str, int]:
        """Declared width/height of an alternate, falling back to the canvas."""
        for alternate in self.alternates(canvas):
            if alternate.get("id") == item_id and alternate.get("width") and alternate.get("height"):
                return {"width": int(alternate["width"]), "height": int(alternate["height"])}
        return {
            "width": int(canvas.get("width") or 0),
            "height": int(canvas.get("height") or 0),
        }

    @staticmethod
    def media_type(resource: Dict[str, Any]) -> str:
        return MEDIA_TYPE_ALIASES[resource["type"]]

    @staticmethod
    def _painting_bodies(canvas: Dict[str, Any]) -> List[Dict[str, Any]]:
        bodies = []
        for page in canvas.get("items") or []:
            for annotation in page.get("items") or []:
                if annotation.get("motivation", "painting") != "painting":
                    continue
                body = annotation.get("body")
                if isinstance(body, list):
                    bodies.extend(b for b in body if isinstance(b, dict))
                elif isinstance(body, dict):
                    bodies.append(body)
        return bodies


def load_manifest(path: Union[str, Path]) -> Manifest:
    """Load a manifest from a local JSON file."""
    path = Path(path)
    with path.open(encoding="utf-8") as f:
        data = json.load(f)
    logger.info(f"Loaded manifest {path} ({len(data.get('items') or [])} canvases)")
    return Manifest(data)
