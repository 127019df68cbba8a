"""
Student groups.

A group is the set of students who share a class and take exactly the same
subjects. Groups are derived on demand from the student list and never
stored, so they always reflect the current enrolment.
"""
from dataclasses import dataclass, field

from django.utils.text import slugify

from .models import normalize_subjects

MATHS_ALIASES = {'math', 'maths', 'mathematics'}
SCIENCE_STREAM = {'mathematics', 'physics', 'chemistry'}


@dataclass
class Group:
    id: str
    name: str
    student_class: str
    subjects: list
    students: list = field(default_factory=list)

    @property
    def key(self):
        return group_key(self.student_class, self.subjects)

    def to_dict(self, include_students=True):
        data = {
            'id': self.id,
            'name': self.name,
            'student_class': self.student_class,
            'subjects': list(self.subjects),
            'student_count': len(self.students),
        }
        if include_students:
            data['students'] = [{'id': s.id, 'name': s.name} for s in self.students]
        return data


def subject_order(subjects):
    """Normalized subjects sorted without regard to case."""
    return sorted(normalize_subjects(subjects), key=str.casefold)


def group_key(student_class, subjects):
    """Case-insensitive: 'Maths' and 'maths' land in the same group."""
    return (str(student_class), tuple(s.casefold() for s in subject_order(subjects)))


def group_id(student_class, subjects):
    _, ordered = group_key(student_class, subjects)
    parts = [str(student_class)] + [slugify(s) for s in ordered]
    return '_'.join(parts)


def _canonical(subject):
    name = subject.strip().lower()
    return 'mathematics' if name in MATHS_ALIASES else name


def mnemonic(subjects):
    """
    Short label for a subject combination.

    The three science streams get their usual names; anything else is
    the initials of the sorted subjects.
    """
    ordered = subject_order(subjects)
    canonical = {_canonical(s) for s in ordered}
    if canonical == SCIENCE_STREAM:
        return 'PCM'
    if canonical == SCIENCE_STREAM | {'biology'}:
        return 'PCB'
    if canonical == SCIENCE_STREAM | {'computer science'}:
        return 'CS'
    return ''.join(s[0].upper() for s in ordered) or 'General'


def group_name(student_class, subjects):
    return f"Class {student_class} - {mnemonic(subjects)}"


def derive_groups(students):
    """Partition students by (class, sorted subjects); ordering is stable."""
    buckets = {}
    for student in students:
        key = group_key(student.student_class, student.subjects)
        buckets.setdefault(key, []).append(student)

    groups = []
    for (student_class, subjects) in sorted(buckets):
        members = sorted(buckets[(student_class, subjects)], key=lambda s: (s.name, s.id))
        # display spelling comes from the first member
        display = subject_order(members[0].subjects)
        groups.append(Group(
            id=group_id(student_class, subjects),
            name=group_name(student_class, display),
            student_class=student_class,
            subjects=display,
            students=members,
        ))
    return groups


def find_group(groups, group_id_value):
    for group in groups:
        if group.id == group_id_value:
            return group
    return None
