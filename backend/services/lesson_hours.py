"""Wall-clock to lesson-hour conversion.

One lesson hour is 45 minutes of driving. Times are ``HH:MM`` strings on a
24-hour clock; an end time earlier than the start time belongs to the next
day.
"""

import re

LESSON_HOUR_MINUTES = 45
MINUTES_PER_DAY = 24 * 60
MAX_APPOINTMENT_HOURS = 24

TIME_PATTERN = re.compile(r'^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$')


def normalize_clock_time(value: str) -> str:
    normalized = value.strip()
    if not TIME_PATTERN.match(normalized):
        raise ValueError('Please provide a valid time in HH:MM format.')

    hours, minutes = normalized.split(':')
    return f'{int(hours):02d}:{minutes}'


def minutes_since_midnight(value: str) -> int:
    hours, minutes = value.split(':')
    return int(hours) * 60 + int(minutes)


def calculate_lesson_hours(start_time: str, end_time: str) -> float:
    elapsed_minutes = minutes_since_midnight(end_time) - minutes_since_midnight(start_time)
    if elapsed_minutes < 0:
        elapsed_minutes += MINUTES_PER_DAY

    return round(elapsed_minutes / LESSON_HOUR_MINUTES, 2)


def is_valid_lesson_hours(hours: float | None) -> bool:
    return hours is not None and 0 < hours <= MAX_APPOINTMENT_HOURS
