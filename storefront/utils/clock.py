from datetime import date, datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def today() -> date:
    return utcnow().date()


def as_utc(value: datetime) -> datetime:
    # DB might return aware (preferred) or naive timestamps depending on driver/config.
    # Treat naive timestamps as UTC so comparisons never mix the two.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
