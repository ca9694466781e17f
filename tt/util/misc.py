import re
from datetime import datetime, timezone

# Fractional seconds of any length (nanosecond stamps written by other tools included) get normalised to
# exactly six digits before parsing.
_FRACTION = re.compile(r"\.(\d+)")


# Simply returns the current time as an aware UTC datetime. Everything stored or compared uses this clock.
def now_utc():
    return datetime.now(timezone.utc)


# Same instant as ISO8601/RFC3339 with a trailing Z, the form written to db.json.
def format_instant(instant):
    return instant.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


# Parses an RFC3339 timestamp into an aware UTC datetime. Accepts `Z` or an explicit offset, and treats naive
# stamps as UTC. Raises ValueError (or TypeError for non-strings) on anything else.
def parse_instant(value):
    if not isinstance(value, str):
        raise TypeError(f"Expected a timestamp string, got {type(value).__name__}")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
