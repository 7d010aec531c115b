from datetime import datetime, timezone


def utcnow_iso() -> str:
    """Current UTC instant as fixed-width ISO-8601, so string order is time order."""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")
