import logging
from datetime import datetime, timedelta
from typing import List, Optional
from messages import format_weekly_message
from models import SentRecord, WeekRange
from services.sent_service import SentService

logger = logging.getLogger(__name__)


def week_range(reference: Optional[datetime] = None) -> WeekRange:
    """
    Sunday 00:00:00.000 through Thursday 23:59:59.999 of the week containing
    `reference` (default: now, local time). The window never lies in the future
    of the reference's week.
    """
    if reference is None:
        # Work on local wall-clock dates, then attach each bound's own UTC offset
        local = week_range(datetime.now())
        return WeekRange(start=local.start.astimezone(), end=local.end.astimezone())

    days_since_sunday = (reference.weekday() + 1) % 7

    sunday = reference.replace(hour=0, minute=0, second=0, microsecond=0) - timedelta(days=days_since_sunday)
    thursday = (sunday + timedelta(days=4)).replace(hour=23, minute=59, second=59, microsecond=999000)
    return WeekRange(start=sunday, end=thursday)


def as_kind_of(date: datetime, like: datetime) -> datetime:
    """Expresses `date` in the same kind of time as `like`: naive local, or aware."""
    if like.tzinfo is None:
        # Naive ranges are local time
        return date.astimezone().replace(tzinfo=None) if date.tzinfo else date
    if date.tzinfo is None:
        return date.astimezone()
    return date


def in_range(date: datetime, range_: WeekRange) -> bool:
    date = as_kind_of(date, range_.start)
    return range_.start <= date <= range_.end


def parse_sent_date(value: str, like: datetime) -> datetime:
    """Parses an ISO timestamp and expresses it in the same kind of time as `like`."""
    return as_kind_of(datetime.fromisoformat(value.replace('Z', '+00:00')), like)


def records_in_range(records: List[SentRecord], range_: WeekRange) -> List[SentRecord]:
    """Records sent inside the range, oldest first."""
    dated = [(parse_sent_date(r.sent_date, range_.start), r) for r in records]
    matching = [(d, r) for d, r in dated if in_range(d, range_)]
    matching.sort(key=lambda pair: pair[0])
    return [r for _, r in matching]


def build_summary(records: List[SentRecord], range_: WeekRange) -> str:
    return format_weekly_message(records_in_range(records, range_), range_.start, range_.end)


class WeeklyService:
    def __init__(self, sent_service: SentService):
        self.sent_service = sent_service

    def get_week_questions(self, now: Optional[datetime] = None) -> List[SentRecord]:
        return records_in_range(self.sent_service.get_sent_records(), week_range(now))

    def get_week_summary(self, now: Optional[datetime] = None) -> str:
        range_ = week_range(now)
        records = self.sent_service.get_sent_records()
        logger.info(f"Building weekly summary for {range_.start.date()} - {range_.end.date()}")
        return build_summary(records, range_)
