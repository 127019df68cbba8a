"""
Monthly attendance grid with a buffered edit session.

The grid keeps two layers per (student, day) cell: the snapshot last read
from the store and a buffer of pending changes. Clicking a cell advances it
one step through ``unmarked -> present -> absent -> unmarked``; nothing is
written until ``save`` flushes the buffer. The whole grid round-trips
through ``to_dict``/``from_dict`` so it can live in the user's session.
"""
import logging
from datetime import date

from django.db import DatabaseError

from .repository import AttendanceStoreError
from .summary import PRESENT, ABSENT, attendance_band, attendance_percentage, month_bounds, month_days

logger = logging.getLogger(__name__)

NEXT_STATUS = {None: PRESENT, PRESENT: ABSENT, ABSENT: None}

MARK = 'mark'
REMOVE = 'remove'


class PendingChangesError(Exception):
    """Raised when leaving a month that still has unsaved edits."""


def next_status(status):
    return NEXT_STATUS[status]


class AttendanceGrid:

    def __init__(self, year, month, students, snapshot=None, pending=None, student_class=None):
        self.year = year
        self.month = month
        self.student_class = student_class
        # [{'id', 'name', 'student_class'}] in display order
        self.students = students
        self.snapshot = dict(snapshot or {})
        self.pending = dict(pending or {})

    @classmethod
    def load(cls, store, year, month, students, student_class=None):
        grid = cls(year, month, [], student_class=student_class)
        grid.refresh(store, students)
        return grid

    def refresh(self, store, students=None):
        """
        Reread the snapshot, and the student rows when ``students`` is given.
        Pending edits are kept on top of it.
        """
        if students is not None:
            self.students = [{'id': s.id, 'name': s.name, 'student_class': s.student_class} for s in students]
        start, end = month_bounds(self.year, self.month)
        records = store.fetch(student_ids=[s['id'] for s in self.students], start=start, end=end)
        self.snapshot = {(r.student_id, r.date): r.status for r in records}

    @property
    def days(self):
        return month_days(self.year, self.month)

    @property
    def is_dirty(self):
        return bool(self.pending)

    def _check_cell(self, student_id, day):
        if not any(s['id'] == student_id for s in self.students):
            raise ValueError(f"Student {student_id} is not in this grid")
        if (day.year, day.month) != (self.year, self.month):
            raise ValueError(f"{day.isoformat()} is outside {self.year}-{self.month:02d}")

    def status_at(self, student_id, day):
        change = self.pending.get((student_id, day))
        if change is not None:
            return change[1] if change[0] == MARK else None
        return self.snapshot.get((student_id, day))

    def toggle(self, student_id, day):
        """Advance one cell and return its new local status."""
        self._check_cell(student_id, day)
        key = (student_id, day)
        new_status = next_status(self.status_at(student_id, day))

        if new_status == self.snapshot.get(key):
            self.pending.pop(key, None)
        elif new_status is None:
            self.pending[key] = (REMOVE, None)
        else:
            self.pending[key] = (MARK, new_status)
        return new_status

    def discard(self):
        self.pending.clear()

    def navigate(self, store, year, month, students, student_class=None):
        if self.is_dirty:
            raise PendingChangesError(
                f"{len(self.pending)} unsaved change(s) for {self.year}-{self.month:02d}. Save or discard them first."
            )
        self.year, self.month = year, month
        self.student_class = student_class
        self.refresh(store, students)

    def save(self, store):
        """
        Flush pending changes one store call at a time. Changes that fail
        stay in the buffer; the rest are folded into the snapshot.
        Returns (applied_count, failures).
        """
        applied = 0
        failures = []
        for (student_id, day), (action, status) in sorted(self.pending.items()):
            try:
                if action == MARK:
                    store.mark(student_id, day, status)
                    self.snapshot[(student_id, day)] = status
                else:
                    store.remove(student_id, day)
                    self.snapshot.pop((student_id, day), None)
            except (AttendanceStoreError, DatabaseError) as e:
                logger.warning("Grid save failed for student=%s date=%s: %s", student_id, day, e)
                failures.append({'student_id': student_id, 'date': day.isoformat(), 'error': str(e)})
                continue
            del self.pending[(student_id, day)]
            applied += 1
        return applied, failures

    def student_stats(self, student_id):
        present = absent = 0
        for day in self.days:
            status = self.status_at(student_id, day)
            if status == PRESENT:
                present += 1
            elif status == ABSENT:
                absent += 1
        total = present + absent
        percentage = round(attendance_percentage(present, total))
        return {
            'present': present,
            'absent': absent,
            'total_marked': total,
            'percentage': percentage,
            'band': attendance_band(percentage),
        }

    def pending_changes(self):
        return [
            {'student_id': student_id, 'date': day.isoformat(), 'action': action, 'status': status}
            for (student_id, day), (action, status) in sorted(self.pending.items())
        ]

    def as_response(self):
        days = self.days
        return {
            'month': f"{self.year}-{self.month:02d}",
            'student_class': self.student_class,
            'days': [d.isoformat() for d in days],
            'students': [{
                **student,
                'cells': {d.isoformat(): self.status_at(student['id'], d) for d in days},
                'stats': self.student_stats(student['id']),
            } for student in self.students],
            'is_dirty': self.is_dirty,
            'pending_changes': self.pending_changes(),
        }

    def to_dict(self):
        return {
            'year': self.year,
            'month': self.month,
            'student_class': self.student_class,
            'students': self.students,
            'snapshot': [[sid, d.isoformat(), status] for (sid, d), status in self.snapshot.items()],
            'pending': [[sid, d.isoformat(), action, status] for (sid, d), (action, status) in self.pending.items()],
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            data['year'],
            data['month'],
            data['students'],
            snapshot={(sid, date.fromisoformat(d)): status for sid, d, status in data['snapshot']},
            pending={(sid, date.fromisoformat(d)): (action, status) for sid, d, action, status in data['pending']},
            student_class=data.get('student_class'),
        )
