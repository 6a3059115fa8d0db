"""Time fragment codec — /time/{start},{stop}/ segments in navigation URLs."""

import re
from typing import Optional

from app.models import TimeRange

# Only the first occurrence in a URL is honored.
TIME_PATTERN = re.compile(r"([0-9]+),([0-9]+)")


class MalformedTimeFragment(ValueError):
    """URL has no parseable start,stop time fragment."""


def _match(url: str) -> Optional[re.Match]:
    if not isinstance(url, str):
        return None
    return TIME_PATTERN.search(url)


def parse(url: str) -> TimeRange:
    """
    Extract the start/stop pair from a navigation URL.

    Raises MalformedTimeFragment if there is no `start,stop` pair or the
    pair is not a valid range (start after stop).
    """
    match = _match(url)
    if match is None:
        raise MalformedTimeFragment(f"No time fragment in URL: {url!r}")

    start, stop = int(match.group(1)), int(match.group(2))
    if start > stop:
        raise MalformedTimeFragment(
            f"Time fragment {match.group(0)!r} starts after it stops: {url!r}"
        )
    return TimeRange(start=start, stop=stop)


def format_range(time_range: TimeRange) -> str:
    """Render the canonical fragment, e.g. /time/10,20/."""
    return f"/time/{time_range.start},{time_range.stop}/"


def replace_stop(url: str, new_stop: int) -> str:
    """
    Keep the URL's own start and substitute new_stop.

    Only the matched (first) fragment is rewritten:
        replace_stop("/x/time/10,20/y", 99) -> "/x/time/10,99/y"
    """
    current = parse(url)
    if new_stop < current.start:
        raise MalformedTimeFragment(
            f"New stop {new_stop} is before start {current.start} in {url!r}"
        )

    match = _match(url)
    new_time = f"{current.start},{int(new_stop)}"
    return url[:match.start()] + new_time + url[match.end():]
