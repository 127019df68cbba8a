from datetime import date
from types import SimpleNamespace

import pytest

from academics.constants import DAYS, TIME_SLOTS
from academics.groups import Group
from academics.timetable import (
    generate_timetable, generate_weekend_tests, split_subjects, balanced_subjects, current_week, EMPTY_SLOT,
)


def member(id, subjects):
    return SimpleNamespace(id=id, name=f"S{id}", student_class='10', subjects=subjects)


def make_group(subjects, students=None):
    return Group(id='10_test', name='Class 10 - T', student_class='10', subjects=subjects, students=students or [])


def test_every_slot_filled_round_robin():
    group = make_group(['Maths', 'Science', 'English'])
    slots = generate_timetable(group, week='2026-W10')

    assert len(slots) == len(DAYS) * len(TIME_SLOTS)
    assert [s.day for s in slots[:len(TIME_SLOTS)]] == ['Monday'] * len(TIME_SLOTS)
    assert {s.subject for s in slots} == {'Maths', 'Science', 'English'}
    # cycling a shuffled list repeats with period equal to the subject count
    assert all(slots[i].subject == slots[i + 3].subject for i in range(len(slots) - 3))


def test_same_week_same_timetable():
    group = make_group(['Maths', 'Science', 'English', 'Tamil', 'Social'])
    first = generate_timetable(group, week='2026-W10')
    again = generate_timetable(group, week='2026-W10')
    assert first == again


def test_empty_subjects_yield_no_class():
    slots = generate_timetable(make_group([]), week='2026-W10')
    assert {s.subject for s in slots} == {EMPTY_SLOT}


def test_unknown_policy():
    with pytest.raises(ValueError):
        generate_timetable(make_group(['Maths']), policy='random')


def test_balanced_pairs_optional_subjects():
    group = make_group(
        ['Biology', 'Chemistry', 'Computer Science', 'Physics'],
        students=[
            member(1, ['Physics', 'Chemistry', 'Biology']),
            member(2, ['Physics', 'Chemistry', 'Computer Science']),
        ],
    )
    core, optional = split_subjects(group)
    assert core == ['Chemistry', 'Physics']
    assert optional == ['Biology', 'Computer Science']
    assert balanced_subjects(group) == ['Chemistry', 'Physics', 'Biology / Computer Science']

    slots = generate_timetable(group, policy='balanced', week='2026-W10')
    assert {s.subject for s in slots} == {'Chemistry', 'Physics', 'Biology / Computer Science'}


def test_odd_optional_subject_stands_alone():
    group = make_group([], students=[
        member(1, ['Maths', 'Tamil']),
        member(2, ['Maths', 'English']),
        member(3, ['Maths', 'Social']),
    ])
    assert balanced_subjects(group) == ['Maths', 'English / Social', 'Tamil']


def test_weekend_tests_start_on_saturday_and_roll_over():
    subjects = ['A', 'B', 'C', 'D', 'E', 'F', 'G']
    group = make_group(subjects)

    tests = generate_weekend_tests([group], start=date(2026, 3, 4))  # a Wednesday

    assert len(tests) == 7
    assert [t.date for t in tests[:3]] == ['2026-03-07'] * 3
    assert [t.date for t in tests[3:6]] == ['2026-03-08'] * 3
    assert tests[6].date == '2026-03-14'
    assert tests[0].start_time == '10:00'
    assert len({t.id for t in tests}) == 7


def test_current_week_label():
    assert current_week(date(2026, 1, 1)) == '2026-W01'
