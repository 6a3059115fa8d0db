"""
Navigation structure — table-of-contents tree built from manifest ranges.

Explicit (leaf) nodes carry their own time range. Implicit (aggregate) nodes
get theirs derived from their last child by `link_structure`, which must see
children before parents.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from app.models import LinkedStructure, NavigationNode, NodeKind, StructureFailure, TimeRange
from app.services import time_range
from app.services.manifest import Manifest, label_text

logger = logging.getLogger(__name__)

MEDIA_FRAGMENT = re.compile(r"#t=([0-9]+(?:\.[0-9]+)?)?(?:,([0-9]+(?:\.[0-9]+)?))?(?=$|&)")


class StructureDerivationFailure(ValueError):
    """An Implicit node's time range cannot be computed."""


# ---------------------------------------------------------------------------
# Build
# ---------------------------------------------------------------------------

def navigation_link(base_url: str, canvas_index: int, span: TimeRange) -> str:
    return f"{base_url}#/canvas/{canvas_index}{time_range.format_range(span)}"


def _media_fragment(target: str, duration: Optional[float]) -> TimeRange:
    """
    Read `#t=start,stop` from a canvas reference; a missing stop means the end.

    Raises ValueError for a `#t=` that is not a number pair.
    """
    start, stop = 0.0, duration or 0.0
    match = MEDIA_FRAGMENT.search(target)
    if match is None and "#t=" in target:
        raise ValueError(f"Malformed media fragment in {target}")
    if match:
        if match.group(1):
            start = float(match.group(1))
        if match.group(2):
            stop = float(match.group(2))
    start, stop = int(start), int(stop)
    return TimeRange(start=start, stop=max(start, stop))


def _build_node(manifest: Manifest, range_: Dict[str, Any], base_url: str) -> Optional[NavigationNode]:
    label = label_text(range_.get("label"), default="Untitled")
    items = range_.get("items") or []
    sub_ranges = [item for item in items if item.get("type") == "Range"]

    if sub_ranges:
        children = []
        for sub_range in sub_ranges:
            child = _build_node(manifest, sub_range, base_url)
            if child is not None:
                children.append(child)
        first_link = _first_explicit_link(children)
        return NavigationNode(
            kind=NodeKind.IMPLICIT,
            label=label,
            link=first_link or f"{base_url}#/",
            children=children,
        )

    canvas_refs = [item for item in items if item.get("type") == "Canvas" and item.get("id")]
    if not canvas_refs:
        logger.warning(f"Range '{label}' has no canvas reference, skipping")
        return None

    target = canvas_refs[0]["id"]
    index = manifest.canvas_index(target)
    if index is None:
        logger.warning(f"Range '{label}' points at unknown canvas {target}, skipping")
        return None

    duration = manifest.canvas(index).get("duration")
    try:
        span = _media_fragment(target, duration)
    except ValueError as e:
        logger.warning(f"Range '{label}' has an unusable time fragment, skipping: {e}")
        return None
    return NavigationNode(
        kind=NodeKind.EXPLICIT,
        label=label,
        link=navigation_link(base_url, index, span),
    )


def _first_explicit_link(nodes: List[NavigationNode]) -> Optional[str]:
    for node in nodes:
        if node.kind is NodeKind.EXPLICIT:
            return node.link
        link = _first_explicit_link(node.children)
        if link:
            return link
    return None


def build_structure(manifest: Manifest, base_url: str = "") -> List[NavigationNode]:
    """Turn the manifest's `structures` ranges into navigation nodes."""
    nodes = []
    for range_ in manifest.structures:
        node = _build_node(manifest, range_, base_url)
        if node is not None:
            nodes.append(node)
    return nodes


# ---------------------------------------------------------------------------
# Link
# ---------------------------------------------------------------------------

def linkify(node: NavigationNode) -> str:
    """
    New link for an Implicit node: its own start, and the START of its last
    child as the stop.

    The last child's link is read as-is, so an Implicit last child must
    already have been linked.
    """
    if not node.children:
        raise StructureDerivationFailure(f"'{node.label}' has no children")

    last_child = node.children[-1]
    try:
        child_range = time_range.parse(last_child.link)
        return time_range.replace_stop(node.link, child_range.start)
    except time_range.MalformedTimeFragment as e:
        raise StructureDerivationFailure(f"'{node.label}': {e}") from e


def link_structure(nodes: List[NavigationNode]) -> LinkedStructure:
    """
    Rewrite the link of every Implicit node, children before parents.

    A node that cannot be linked keeps its old link and is reported in
    `failures`; its siblings and ancestors are still processed.
    """
    failures: List[StructureFailure] = []

    def visit(node: NavigationNode):
        for child in node.children:
            visit(child)
        if node.kind is not NodeKind.IMPLICIT:
            return
        try:
            node.link = linkify(node)
        except StructureDerivationFailure as e:
            logger.warning(f"Could not link structure node: {e}")
            failures.append(StructureFailure(label=node.label, link=node.link, reason=str(e)))

    for node in nodes:
        visit(node)

    return LinkedStructure(nodes=nodes, failures=failures)
