"""Data models for the AV navigator — time ranges, navigation and playback types."""

from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, model_validator
from enum import Enum


# Enums
class MediaKind(str, Enum):
    AUDIO = "Audio"
    VIDEO = "Video"

    @property
    def tag(self) -> str:
        """HTML element used to host this kind of media."""
        return _MEDIA_TAGS[self]

    @property
    def mime_type(self) -> str:
        return _MEDIA_MIME_TYPES[self]


_MEDIA_TAGS = {
    MediaKind.AUDIO: "audio",
    MediaKind.VIDEO: "video",
}

_MEDIA_MIME_TYPES = {
    MediaKind.AUDIO: "audio/mp3",
    MediaKind.VIDEO: "video/mp4",
}


class NodeKind(str, Enum):
    EXPLICIT = "Explicit"
    IMPLICIT = "Implicit"


class PlayerState(str, Enum):
    UNINITIALIZED = "Uninitialized"
    ACTIVE = "Active"
    DESTROYED = "Destroyed"


# Core value types
class TimeRange(BaseModel):
    """A playback range in whole seconds."""
    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0)
    stop: int = Field(ge=0)

    @model_validator(mode="after")
    def _check_order(self):
        if self.start > self.stop:
            raise ValueError(f"start ({self.start}) is after stop ({self.stop})")
        return self


class Dimensions(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int = 0
    height: int = 0


class SubtitleRef(BaseModel):
    """A text track attached to a canvas."""
    model_config = ConfigDict(frozen=True)

    id: str
    language: Optional[str] = None
    format: Optional[str] = None


class ContentItem(BaseModel):
    """A resolved playable resource for one canvas at one quality."""
    model_config = ConfigDict(frozen=True)

    id: str
    type: MediaKind
    label: str
    subtitle: Optional[SubtitleRef] = None


class NavigationNode(BaseModel):
    """A table-of-contents entry. Only Implicit nodes have their link rewritten."""
    kind: NodeKind
    label: str
    link: str
    children: List["NavigationNode"] = []


NavigationNode.model_rebuild()


class StructureFailure(BaseModel):
    """An Implicit node whose range could not be derived."""
    label: str
    link: str
    reason: str


class LinkedStructure(BaseModel):
    """A navigation tree after linking, plus the nodes that were skipped."""
    nodes: List[NavigationNode]
    failures: List[StructureFailure] = []


class PlayerSession(BaseModel):
    """State owned by the player controller."""
    state: PlayerState = PlayerState.UNINITIALIZED
    current_type: Optional[MediaKind] = None
    current_item: Optional[ContentItem] = None
    element_id: Optional[str] = None
    canvas_index: Optional[int] = None
    quality: Optional[str] = None  # Resolved label
    requested_quality: Optional[str] = None


class NavigationEvent(BaseModel):
    """A hash change or link activation."""
    url: str
    canvas_index: Optional[int] = None
    quality: Optional[str] = None


# API Request/Response Models
class ResolvedItem(BaseModel):
    """A resolved item together with what the markup generator needs."""
    canvas_index: int
    item: ContentItem
    dimensions: Dimensions
    requested_quality: str


class QualityChoice(BaseModel):
    label: str
    selected: bool = False


class QualityChoices(BaseModel):
    """Quality menu for one canvas."""
    current: Optional[str] = None
    choices: List[QualityChoice]


class RenderRequest(BaseModel):
    """Request to load a canvas into the player."""
    canvas_index: int = 0
    quality: Optional[str] = None


class PlayerView(BaseModel):
    """Current player session and the markup mounted in the player region."""
    session: PlayerSession
    markup: str = ""
    current_time: Optional[float] = None
    paused: Optional[bool] = None
