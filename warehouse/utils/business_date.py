from datetime import date, datetime, timezone


def business_today() -> date:
    """Calendar day used for business_date defaults and the dashboard trend (UTC)."""
    return datetime.now(timezone.utc).date()
