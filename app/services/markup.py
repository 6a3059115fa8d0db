"""HTML markup for the player element and the structure navigation."""

from html import escape
from typing import List, Optional

from app.models import ContentItem, Dimensions, MediaKind, NavigationNode, NodeKind, SubtitleRef


def generate_player_markup(
    item: ContentItem,
    element_id: str,
    dimensions: Dimensions,
    subtitle: Optional[SubtitleRef] = None,
) -> str:
    """
    <audio> or <video> markup for one resolved item.

    Audio gets a single source. Video gets a single source, its dimensions
    and, when available, one subtitle track.
    """
    src = escape(item.id)
    el_id = escape(element_id)

    if item.type is MediaKind.AUDIO:
        return (
            f'<audio width="100%" controls id="{el_id}" '
            f"data-mejsoptions='{{\"stretching\": \"responsive\"}}'>\n"
            f'  <source src="{src}" type="{item.type.mime_type}" data-quality="{escape(item.label)}">\n'
            f"</audio>"
        )

    if item.type is MediaKind.VIDEO:
        track = ""
        if subtitle is not None:
            srclang = f' srclang="{escape(subtitle.language)}"' if subtitle.language else ""
            track = f'  <track kind="subtitles" src="{escape(subtitle.id)}"{srclang}>\n'
        return (
            f'<video class="av-player-controls mejs__player" id="{el_id}" '
            f'height="{dimensions.height}" width="{dimensions.width}" controls '
            f"data-mejsoptions='{{\"pluginPath\": \"\", \"alwaysShowControls\": \"true\"}}'>\n"
            f'  <source src="{src}" type="{item.type.mime_type}" data-quality="{escape(item.label)}">\n'
            f"{track}"
            f"</video>"
        )

    raise ValueError(f"Unsupported media kind: {item.type}")


def render_structure(nodes: List[NavigationNode]) -> str:
    """Nested list of structure links, classed implicit/explicit."""
    if not nodes:
        return ""
    parts = ["<ul>"]
    for node in nodes:
        css_class = "implicit" if node.kind is NodeKind.IMPLICIT else "explicit"
        parts.append(
            f'<li class="{css_class}">'
            f'<a class="media-structure-uri" href="{escape(node.link)}">{escape(node.label)}</a>'
            f"{render_structure(node.children)}</li>"
        )
    parts.append("</ul>")
    return "".join(parts)
