"""
Weekly timetables and weekend test schedules for student groups.

Two policies fill the Monday-Friday grid:

- ``round_robin``: shuffle the group's subjects and cycle through them,
  day-major, until every slot has a subject.
- ``balanced``: subjects every member takes are "core"; the rest are
  optional and paired two at a time into shared slots ("Biology / Computer
  Science") before the same shuffle-and-cycle pass.

The shuffle is seeded from the group id and ISO week, so a group keeps the
same timetable for the whole week and gets a fresh one the next.
"""
import random
from dataclasses import dataclass, asdict
from datetime import timedelta

from django.utils import timezone
from django.utils.text import slugify

from .constants import DAYS, TIME_SLOTS, TEST_SLOTS
from .models import normalize_subjects

POLICIES = ('round_robin', 'balanced')
EMPTY_SLOT = 'No Class'


@dataclass
class TimetableSlot:
    day: str
    start_time: str
    end_time: str
    subject: str


@dataclass
class WeekendTest:
    id: str
    group_id: str
    subject: str
    date: str
    start_time: str
    end_time: str


def current_week(today=None):
    today = today or timezone.localdate()
    year, week, _ = today.isocalendar()
    return f"{year}-W{week:02d}"


def split_subjects(group):
    """Return (core, optional) subject lists for a group's members."""
    display = {s.casefold(): s for s in group.subjects}
    member_subjects = [{display.get(s.casefold(), s) for s in normalize_subjects(m.subjects)} for m in group.students]
    if not member_subjects:
        return sorted(normalize_subjects(group.subjects)), []
    core = set.intersection(*member_subjects)
    optional = set.union(*member_subjects) - core
    return sorted(core), sorted(optional)


def balanced_subjects(group):
    core, optional = split_subjects(group)
    paired = [' / '.join(optional[i:i + 2]) for i in range(0, len(optional), 2)]
    return core + paired


def generate_timetable(group, policy='round_robin', week=None, seed=None):
    if policy not in POLICIES:
        raise ValueError(f"Unknown timetable policy: {policy}")

    week = week or current_week()
    rng = random.Random(seed if seed is not None else f"{group.id}:{week}")

    if policy == 'balanced':
        subjects = balanced_subjects(group)
    else:
        subjects = sorted(normalize_subjects(group.subjects))
    rng.shuffle(subjects)

    slots = []
    index = 0
    for day in DAYS:
        for start, end in TIME_SLOTS:
            subject = subjects[index % len(subjects)] if subjects else EMPTY_SLOT
            slots.append(TimetableSlot(day, start, end, subject))
            index += 1
    return slots


def timetable_as_dict(group, slots, policy, week):
    return {
        'group_id': group.id,
        'group_name': group.name,
        'policy': policy,
        'week': week,
        'days': DAYS,
        'time_slots': [f"{start}-{end}" for start, end in TIME_SLOTS],
        'slots': [asdict(slot) for slot in slots],
    }


def next_saturday(start):
    return start + timedelta(days=(5 - start.weekday()) % 7)


def generate_weekend_tests(groups, start=None):
    """
    One test per subject per group, packed into Saturday then Sunday test
    slots from the first Saturday on or after ``start``. Subjects that do
    not fit roll over to the following weekend.
    """
    first_saturday = next_saturday(start or timezone.localdate())
    per_day = len(TEST_SLOTS)

    tests = []
    for group in groups:
        for index, subject in enumerate(sorted(normalize_subjects(group.subjects))):
            weekend, remainder = divmod(index, per_day * 2)
            day_offset, slot_index = divmod(remainder, per_day)
            day = first_saturday + timedelta(weeks=weekend, days=day_offset)
            start_time, end_time = TEST_SLOTS[slot_index]
            tests.append(WeekendTest(
                id=f"{group.id}:{slugify(subject)}:{day.isoformat()}",
                group_id=group.id,
                subject=subject,
                date=day.isoformat(),
                start_time=start_time,
                end_time=end_time,
            ))
    tests.sort(key=lambda t: (t.date, t.start_time, t.group_id))
    return tests
