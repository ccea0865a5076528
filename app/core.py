# app/core.py

from datetime import date, datetime, time, timedelta


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    """Half-open interval intersection: [a_start, a_end) and [b_start, b_end)."""
    return a_start < b_end and b_start < a_end


def at(on_date: date, moment: time) -> datetime:
    return datetime.combine(on_date, moment)


def day_bounds(on_date: date):
    start = datetime.combine(on_date, time.min)
    return start, start + timedelta(days=1)


def iter_slots(open_at: datetime, close_at: datetime, duration: timedelta, step: timedelta):
    """Yield (start, end) candidates from open_at, every step, ending no later than close_at."""
    current = open_at
    while current < close_at:
        end = current + duration
        if end > close_at:
            break
        yield current, end
        current += step
