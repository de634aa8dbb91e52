from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    # colunas DateTime sem timezone, sempre em UTC
    return datetime.now(tz=timezone.utc).replace(tzinfo=None)


def to_epoch(dt: datetime) -> int:
    return int(dt.replace(tzinfo=timezone.utc).timestamp())
