from datetime import datetime, timezone

def utcnow() -> datetime:
    """Current aware UTC time. Used as a dependency so the clock can be overridden."""
    return datetime.now(timezone.utc)
