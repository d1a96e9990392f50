from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def today_string() -> str:
    """Current UTC day as YYYY-MM-DD"""
    return utc_now().strftime('%Y-%m-%d')


def parse_date_string(date_string) -> datetime:
    """Parse date string handling different formats"""
    if isinstance(date_string, datetime):
        return date_string.replace(tzinfo=None)

    value = str(date_string).strip()
    if value.endswith('Z'):
        value = value[:-1]

    try:
        # Try ISO format first (with time)
        return datetime.fromisoformat(value).replace(tzinfo=None)
    except ValueError:
        # Try other common formats
        for fmt in ['%Y-%m-%d %H:%M:%S', '%Y/%m/%d', '%m/%d/%Y', '%d-%m-%Y']:
            try:
                return datetime.strptime(value, fmt)
            except ValueError:
                continue
        raise ValueError(f"Unable to parse date format: {date_string}")


def to_day(date_string) -> datetime:
    """Parse and truncate to midnight, for date-only comparisons"""
    parsed = parse_date_string(date_string)
    return parsed.replace(hour=0, minute=0, second=0, microsecond=0)
