"""Turn a navigation URL (link href or location hash) into a NavigationEvent."""

import re

from app.models import NavigationEvent

CANVAS_SEGMENT = re.compile(r"/canvas/(\d+)(?=/|$)")
QUALITY_SEGMENT = re.compile(r"/quality/([^/#?]+)")


def parse_navigation(url: str) -> NavigationEvent:
    """
    Read the optional canvas and quality segments from the URL's hash.

    The full URL is kept on the event; the time range is left for the
    codec to extract.
    """
    fragment = url.split("#", 1)[1] if "#" in url else url

    canvas_match = CANVAS_SEGMENT.search(fragment)
    quality_match = QUALITY_SEGMENT.search(fragment)

    return NavigationEvent(
        url=url,
        canvas_index=int(canvas_match.group(1)) if canvas_match else None,
        quality=quality_match.group(1) if quality_match else None,
    )
