# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Schedule Trigger
Fires on a cron schedule, optionally bounded by a start and end date
"""

from datetime import datetime, timezone
from typing import Callable, Dict, Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from croniter import croniter

from agentflow.models import CamelModel, TriggerPayload, TriggerType, ValidationResult
from agentflow.triggers.base import TriggerHandler, result_from_errors

COMMON_SCHEDULES = {
    "* * * * *": "Every minute",
    "0 * * * *": "Every hour",
    "0 0 * * *": "Every day at midnight",
    "0 9 * * 1-5": "Weekdays at 9:00 AM",
    "0 9 * * 1": "Every Monday at 9:00 AM",
    "0 0 1 * *": "First day of every month at midnight",
}


def is_valid_cron(cron: Any) -> bool:
    """Standard 5-field cron expression"""
    if not isinstance(cron, str) or len(cron.split()) != 5:
        return False
    return croniter.is_valid(cron)


def get_timezone(name: Any) -> Optional[ZoneInfo]:
    if not isinstance(name, str) or not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return None


def parse_date(value: Any, tz: Optional[ZoneInfo] = None) -> Optional[datetime]:
    """ISO-8601 date or datetime; naive values are read in the trigger's timezone"""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz or timezone.utc)
    return parsed


def get_next_run(cron: str, timezone_name: str = "UTC", after: Optional[datetime] = None) -> datetime:
    """Next fire time strictly after `after` (default: now) in the given timezone"""
    tz = get_timezone(timezone_name) or timezone.utc
    start = (after or datetime.now(timezone.utc)).astimezone(tz)
    return croniter(cron, start).get_next(datetime)


def describe_cron(cron: str) -> str:
    """Human-readable description for common schedules"""
    parts = cron.split()
    if len(parts) != 5:
        return cron

    if cron in COMMON_SCHEDULES:
        return COMMON_SCHEDULES[cron]

    minute, hour = parts[0], parts[1]
    if minute.isdigit() and hour.isdigit() and parts[2:] == ["*", "*", "*"]:
        return f"Every day at {int(hour):02d}:{int(minute):02d}"

    return f"At {minute} {hour} ({cron})"


class ScheduleTick(CamelModel):
    scheduled_time: Optional[str] = None
    actual_time: Optional[str] = None
    run_number: Optional[int] = None


class ScheduleTriggerHandler(TriggerHandler):
    trigger_type = TriggerType.SCHEDULE.value

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def validate_config(self, config: Dict[str, Any]) -> ValidationResult:
        errors = []

        cron = config.get("cron")
        if not is_valid_cron(cron):
            errors.append(f"Invalid cron expression: {cron}")

        tz = get_timezone(config.get("timezone"))
        if tz is None:
            errors.append(f"Invalid timezone: {config.get('timezone')}")

        start = end = None
        if config.get("startDate") is not None:
            start = parse_date(config["startDate"], tz)
            if start is None:
                errors.append(f"Invalid start date: {config['startDate']}")
        if config.get("endDate") is not None:
            end = parse_date(config["endDate"], tz)
            if end is None:
                errors.append(f"Invalid end date: {config['endDate']}")

        if start and end and start >= end:
            errors.append("Start date must be before end date")

        return result_from_errors(errors)

    async def parse_payload(self, raw_data: Any, config: Dict[str, Any]) -> TriggerPayload:
        tick = self._parse_raw(ScheduleTick, raw_data)

        data = {
            "scheduled_time": tick.scheduled_time,
            "actual_time": tick.actual_time or self.clock().isoformat(),
            "cron": config.get("cron"),
            "timezone": config.get("timezone"),
            "run_number": tick.run_number,
        }
        return self._build_payload(data, source="schedule")

    def matches_filters(self, payload: TriggerPayload, config: Dict[str, Any]) -> bool:
        now = self.clock()
        tz = get_timezone(config.get("timezone"))

        start = parse_date(config.get("startDate"), tz)
        if start is not None and start > now:
            return False

        end = parse_date(config.get("endDate"), tz)
        if end is not None and end < now:
            return False

        return True

    def get_next_run(self, config: Dict[str, Any]) -> datetime:
        return get_next_run(config["cron"], config.get("timezone") or "UTC", after=self.clock())
