"""
Player lifecycle — owns the one live media element and player instance.

The controller is the only thing allowed to touch the player region or hold
the player handle. Every switch destroys the previous instance before the
next one is created, so at most one <audio>/<video> element is mounted.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from app.config import settings
from app.models import ContentItem, Dimensions, NavigationEvent, PlayerSession, PlayerState, TimeRange
from app.services import time_range
from app.services.manifest import Manifest
from app.services.manifest_resolver import resolve_dimensions, resolve_item
from app.services.markup import generate_player_markup

logger = logging.getLogger(__name__)

MarkupGenerator = Callable[[ContentItem, str, Dimensions, Any], str]
PlayerFactory = Callable[[str, Dict[str, Any]], Any]


@dataclass
class MediaElement:
    """A mounted <audio>/<video> element."""
    tag: str
    element_id: str
    markup: str


class PlayerRegion:
    """The page region that hosts the player element."""

    def __init__(self, region_id: str):
        self.region_id = region_id
        self._elements: List[MediaElement] = []

    def mount(self, element: MediaElement):
        self._elements.append(element)

    def unmount(self, element: MediaElement):
        for i, mounted in enumerate(self._elements):
            if mounted is element:
                del self._elements[i]
                return
        raise LookupError(f"<{element.tag} id={element.element_id}> is not mounted in {self.region_id}")

    def elements(self, tag: Optional[str] = None) -> List[MediaElement]:
        return [e for e in self._elements if tag is None or e.tag == tag]

    @property
    def markup(self) -> str:
        return "\n".join(e.markup for e in self._elements)


class HeadlessPlayer:
    """
    Server-side stand-in for a MediaElement player.

    Tracks paused state and position so the service can report them.
    """

    def __init__(self, element_id: str, options: Optional[Dict[str, Any]] = None):
        self.element_id = element_id
        self.options = dict(options or {})
        self.paused = True
        self.current_time = 0.0
        self.removed = False

    def play(self):
        self._check_live()
        self.paused = False

    def pause(self):
        self._check_live()
        self.paused = True

    def set_current_time(self, seconds: float):
        self._check_live()
        self.current_time = float(seconds)

    def remove(self):
        self.removed = True

    def _check_live(self):
        if self.removed:
            raise RuntimeError(f"Player {self.element_id} has been removed")


class PlayerController:
    """Loads canvases into the player and keeps the session state."""

    def __init__(
        self,
        manifest: Manifest,
        region: Optional[PlayerRegion] = None,
        player_factory: PlayerFactory = HeadlessPlayer,
        markup_generator: MarkupGenerator = generate_player_markup,
        element_id: str = settings.player_element_id,
        default_quality: str = settings.default_quality,
        player_options: Optional[Dict[str, Any]] = None,
    ):
        self.manifest = manifest
        self.region = region or PlayerRegion(settings.player_wrapper_id)
        self.player_factory = player_factory
        self.markup_generator = markup_generator
        self.element_id = element_id
        self.default_quality = default_quality
        self.player_options = dict(player_options or {})

        self.session = PlayerSession()
        self._player = None
        self._element: Optional[MediaElement] = None

    @property
    def player(self):
        return self._player

    def render(self, canvas_index: int, quality: Optional[str] = None) -> ContentItem:
        """
        Load a canvas at a quality, replacing whatever is playing.

        Resolution happens first and leaves the current player untouched if it
        fails. Anything failing after the old instance is destroyed leaves the
        session Destroyed and re-raises.
        """
        quality = quality or self.session.quality or self.default_quality
        canvas = self.manifest.canvas(canvas_index)
        item = resolve_item(self.manifest, canvas, quality, default_quality=self.default_quality)
        dimensions = resolve_dimensions(self.manifest, canvas, item)

        try:
            if self.session.state is PlayerState.ACTIVE:
                self._destroy_instance()
            markup = self.markup_generator(item, self.element_id, dimensions, item.subtitle)
            element = MediaElement(tag=item.type.tag, element_id=self.element_id, markup=markup)
            self.region.mount(element)
            self._element = element
            self._player = self.player_factory(self.element_id, dict(self.player_options))
        except Exception:
            logger.error(f"Failed to render canvas {canvas_index} ({item.id})")
            self._destroy_instance()
            self._enter_destroyed()
            raise

        self.session = PlayerSession(
            state=PlayerState.ACTIVE,
            current_type=item.type,
            current_item=item,
            element_id=self.element_id,
            canvas_index=canvas_index,
            quality=item.label,
            requested_quality=quality,
        )
        logger.info(f"Rendered canvas {canvas_index}: {item.type.value} '{item.label}' {item.id}")
        return item

    def navigate(self, event: NavigationEvent) -> TimeRange:
        """
        Seek to the start of the event's time range.

        The player is only reloaded when the event names a different canvas
        or quality than the current one.
        """
        span = time_range.parse(event.url)

        canvas_changed = event.canvas_index is not None and event.canvas_index != self.session.canvas_index
        # A missing quality resolves to a fallback label, so compare against both
        quality_changed = event.quality is not None and event.quality not in (
            self.session.quality,
            self.session.requested_quality,
        )
        if canvas_changed or quality_changed:
            target = event.canvas_index if event.canvas_index is not None else self.session.canvas_index
            if target is None:
                logger.warning(f"Quality change to '{event.quality}' with no canvas loaded, ignoring")
            else:
                self.render(target, event.quality)

        if self.session.state is PlayerState.ACTIVE and self._player is not None:
            self._player.set_current_time(span.start)
            logger.debug(f"Seek to {span.start}s ({event.url})")
        return span

    def play(self):
        """Start playback of the active player, if any."""
        if self.session.state is PlayerState.ACTIVE and self._player is not None:
            self._player.play()

    def pause(self):
        """Pause the active player if it is playing."""
        if self.session.state is PlayerState.ACTIVE and self._player is not None:
            if not self._player.paused:
                self._player.pause()

    def teardown(self):
        """Destroy the player. Calling it when nothing is active does nothing."""
        if self.session.state is not PlayerState.ACTIVE:
            return
        try:
            self._destroy_instance()
        finally:
            self._enter_destroyed()
        logger.info("Player torn down")

    def _destroy_instance(self):
        player, element = self._player, self._element
        self._player = None
        self._element = None
        try:
            if player is not None:
                if not player.paused:
                    player.pause()
                player.remove()
        finally:
            if element is not None:
                self.region.unmount(element)

    def _enter_destroyed(self):
        self.session = PlayerSession(state=PlayerState.DESTROYED)
