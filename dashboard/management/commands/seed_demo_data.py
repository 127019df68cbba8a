from datetime import timedelta, date
from decimal import Decimal
from random import Random

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from academics.constants import CLASSES, SUBJECTS
from academics.models import Student
from attendance.models import AttendanceRecord
from results.grading import filing_week
from results.models import WeeklyTestMark

User = get_user_model()

FIRST_NAMES = ['Arun', 'Priya', 'Karthik', 'Divya', 'Vijay', 'Meena', 'Surya', 'Lakshmi', 'Ravi', 'Anitha',
               'Harish', 'Kavya', 'Naveen', 'Deepa', 'Gokul', 'Sneha']
LAST_NAMES = ['Kumar', 'Raman', 'Selvam', 'Murugan', 'Pandian', 'Krishnan']


class Command(BaseCommand):
    help = "Seed demo data: staff, students, attendance and weekly test marks"

    def add_arguments(self, parser):
        parser.add_argument('--students', type=int, default=20, help='Number of students to create')
        parser.add_argument('--staff', type=int, default=3, help='Number of staff accounts to create')
        parser.add_argument('--attendance-days', type=int, default=30, help='Number of past weekdays to create attendance for')
        parser.add_argument('--weeks', type=int, default=6, help='Number of past weeks of test marks to create')
        parser.add_argument('--seed', type=int, default=42, help='Random seed so repeated runs produce the same data')

    def handle(self, *args, **options):
        rng = Random(options['seed'])
        num_students = options['students']
        num_staff = options['staff']
        attendance_days = options['attendance_days']
        weeks = options['weeks']

        # Staff
        staff = []
        for i in range(1, num_staff + 1):
            user, created = User.objects.get_or_create(username=f"staff{i}", defaults={
                "first_name": f"Staff{i}",
                "last_name": "Demo",
                "email": f"staff{i}@example.com",
            })
            if created:
                user.set_password("staff123")
                user.save()
            staff.append(user)
        self.stdout.write(self.style.SUCCESS(f"Staff: {len(staff)}"))

        # Students, spread across classes with 2-5 subjects each
        students = []
        for i in range(1, num_students + 1):
            name = f"{FIRST_NAMES[i % len(FIRST_NAMES)]} {LAST_NAMES[i % len(LAST_NAMES)]} {i}"
            subjects = sorted(rng.sample(SUBJECTS, rng.randint(2, len(SUBJECTS))))
            student, _ = Student.objects.get_or_create(name=name, defaults={
                "student_class": rng.choice(CLASSES),
                "subjects": subjects,
                "gender": rng.choice(['male', 'female']),
                "parent_phone": f"98{rng.randint(10000000, 99999999)}",
                "school_name": "Government Higher Secondary School",
                "assigned_staff": rng.choice(staff) if staff else None,
            })
            students.append(student)
        self.stdout.write(self.style.SUCCESS(f"Students: {len(students)}"))

        # Attendance for the last N weekdays
        attendance_created = 0
        today = date.today()
        day = today
        marked_days = 0
        while marked_days < attendance_days:
            if day.weekday() < 5:
                for student in students:
                    status = AttendanceRecord.PRESENT if rng.random() > 0.15 else AttendanceRecord.ABSENT
                    _, created = AttendanceRecord.objects.get_or_create(student=student, date=day, defaults={"status": status})
                    attendance_created += int(created)
                marked_days += 1
            day -= timedelta(days=1)
        self.stdout.write(self.style.SUCCESS(f"Attendance records created: {attendance_created}"))

        # One test per subject per week, held on Saturday
        marks_created = 0
        for w in range(weeks):
            test_day = today - timedelta(days=today.weekday() + 2 + 7 * w)
            year, week = filing_week(test_day)
            for student in students:
                for subject in student.subjects:
                    _, created = WeeklyTestMark.objects.get_or_create(
                        student=student,
                        subject=subject,
                        year=year,
                        week_number=week,
                        defaults={
                            "marks_obtained": Decimal(rng.randint(25, 100)),
                            "total_marks": Decimal(100),
                            "test_date": test_day,
                        },
                    )
                    marks_created += int(created)
        self.stdout.write(self.style.SUCCESS(f"Weekly test marks created: {marks_created}"))

        self.stdout.write(self.style.SUCCESS("Demo data seeding complete."))
