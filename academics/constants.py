SUBJECTS = ['Tamil', 'English', 'Maths', 'Science', 'Social']

CLASSES = ['6', '7', '8', '9', '10']

DAYS = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday']

# (start, end) in 24h time; the gaps are the short break and lunch
TIME_SLOTS = [
    ('09:00', '09:45'),
    ('09:45', '10:30'),
    ('10:45', '11:30'),
    ('11:30', '12:15'),
    ('13:00', '13:45'),
    ('13:45', '14:30'),
    ('14:30', '15:15'),
]

# Weekend test slots, filled in order on Saturday then Sunday
TEST_SLOTS = [
    ('10:00', '11:00'),
    ('11:30', '12:30'),
    ('14:00', '15:00'),
]

GENDER_CHOICES = [
    ('male', 'Male'),
    ('female', 'Female'),
    ('other', 'Other'),
]
