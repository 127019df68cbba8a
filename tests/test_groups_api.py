import pytest

pytestmark = pytest.mark.django_db


def test_groups_list_and_timetable(api_client, make_student):
    make_student(name='Arun', subjects=['Maths', 'Science'])
    make_student(name='Divya', subjects=['Science', 'Maths'])
    make_student(name='Karthik', student_class='9', subjects=['Tamil'])

    groups = api_client.get('/api/groups/').data
    assert [g['name'] for g in groups] == ['Class 10 - MS', 'Class 9 - T']
    assert groups[0]['student_count'] == 2

    timetable = api_client.get(f"/api/groups/{groups[0]['id']}/timetable/", {'week': '2026-W10'})
    assert timetable.status_code == 200
    assert len(timetable.data['slots']) == 35
    assert timetable.data['week'] == '2026-W10'

    again = api_client.get(f"/api/groups/{groups[0]['id']}/timetable/", {'week': '2026-W10'})
    assert again.data['slots'] == timetable.data['slots']


def test_unknown_group_and_policy(api_client, make_student):
    make_student()
    assert api_client.get('/api/groups/nope/').status_code == 404
    group_id = api_client.get('/api/groups/').data[0]['id']
    assert api_client.get(f'/api/groups/{group_id}/timetable/', {'policy': 'chaos'}).status_code == 400


def test_test_schedule(api_client, make_student):
    make_student(subjects=['Maths', 'Science'])
    response = api_client.get('/api/groups/test_schedule/', {'start': '2026-03-04'})

    assert response.status_code == 200
    assert [t['subject'] for t in response.data] == ['Maths', 'Science']
    assert response.data[0]['date'] == '2026-03-07'
    assert response.data[0]['group_name'] == 'Class 10 - MS'
    assert api_client.get('/api/groups/test_schedule/', {'start': 'soon'}).status_code == 400
