from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

# Internet date-time of RFC 3339 section 5.6.  Fractional seconds are
# optional; the UTC designator must be an upper case "Z".
RFC3339_RE = re.compile(
    r"(?P<year>[0-9]{4})-(?P<month>[0-9]{2})-(?P<day>[0-9]{2})"
    r"T(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})"
    r"(?:\.(?P<fraction>[0-9]+))?"
    r"(?P<offset>Z|(?P<sign>[+-])(?P<tzhour>[0-9]{2}):(?P<tzminute>[0-9]{2}))"
)


def parse_rfc3339(value: str) -> datetime:
    """Parse an RFC 3339 timestamp into an aware :class:`datetime`.

    Fractional seconds beyond microsecond precision are truncated.  Raises
    :class:`ValueError` for anything else, including ISO 8601 forms that
    RFC 3339 does not allow (missing offset, date only, lower case
    separators).
    """
    m = RFC3339_RE.fullmatch(value)
    if m is None:
        raise ValueError(f"parsing time {value!r} as RFC3339: invalid syntax")

    if m.group("offset") == "Z":
        tz = timezone.utc
    else:
        tzhour = int(m.group("tzhour"))
        tzminute = int(m.group("tzminute"))
        if tzhour > 23 or tzminute > 59:
            raise ValueError(f"parsing time {value!r} as RFC3339: time zone offset out of range")
        offset = timedelta(hours=tzhour, minutes=tzminute)
        tz = timezone(-offset if m.group("sign") == "-" else offset)

    fraction = m.group("fraction") or ""
    microsecond = int(fraction[:6].ljust(6, "0"))

    try:
        return datetime(
            int(m.group("year")),
            int(m.group("month")),
            int(m.group("day")),
            int(m.group("hour")),
            int(m.group("minute")),
            int(m.group("second")),
            microsecond,
            tzinfo=tz,
        )
    except ValueError as e:
        raise ValueError(f"parsing time {value!r} as RFC3339: {e}") from e
