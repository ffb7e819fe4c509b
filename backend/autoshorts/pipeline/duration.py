"""ISO 8601 duration parsing for YouTube contentDetails.duration."""
import re
from typing import Optional

_DURATION_RE = re.compile(
    r"P(?:(?P<days>\d+)D)?(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?"
)


def parse_duration(value: Optional[str]) -> int:
    """
    Convert a duration such as "PT1H2M3S" to whole seconds.

    Duration is only used to clamp window ends, so anything missing or
    unparseable yields 0 rather than an error.
    """
    if not value or not isinstance(value, str):
        return 0

    match = _DURATION_RE.search(value.strip().upper())
    if not match:
        return 0

    parts = {name: int(num) if num else 0 for name, num in match.groupdict().items()}
    return (
        parts["days"] * 86400
        + parts["hours"] * 3600
        + parts["minutes"] * 60
        + parts["seconds"]
    )
