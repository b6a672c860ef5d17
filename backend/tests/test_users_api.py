import pytest
from sqlalchemy.exc import OperationalError
from app import db


def test_signup_returns_user_without_password(client):
    res = client.post('/api/user/signup', json={'username': 'alice', 'password': 'password', 'biography': 'hi'})
    assert res.status_code == 200
    user = res.get_json()
    assert user['username'] == 'alice'
    assert user['biography'] == 'hi'
    assert 'dateJoined' in user
    assert 'password' not in user
    assert 'password_hash' not in user


def test_signup_rejects_missing_fields(client):
    res = client.post('/api/user/signup', json={'username': 'alice'})
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Invalid user body'

    res = client.post('/api/user/signup', json={'username': '', 'password': 'password'})
    assert res.status_code == 400


def test_signup_duplicate_username(client, make_user):
    make_user('alice')
    res = client.post('/api/user/signup', json={'username': 'alice', 'password': 'other-password'})
    assert res.status_code == 500
    assert res.get_json()['error'] == 'Error when saving user: Username already exists'


def test_login(client, make_user):
    make_user('alice', password='secret123')

    res = client.post('/api/user/login', json={'username': 'alice', 'password': 'secret123'})
    assert res.status_code == 200
    assert res.get_json()['username'] == 'alice'

    res = client.post('/api/user/login', json={'username': 'alice', 'password': 'wrong'})
    assert res.status_code == 401

    res = client.post('/api/user/login', json={'username': 'nobody', 'password': 'secret123'})
    assert res.status_code == 401

    res = client.post('/api/user/login', json={'username': 'alice'})
    assert res.status_code == 400


def test_logout(client, make_user):
    make_user('alice')
    res = client.post('/api/user/logout')
    assert res.status_code == 200


def test_get_user_and_list(client, make_user):
    make_user('alice')
    make_user('bob')

    res = client.get('/api/user/getUser/alice')
    assert res.status_code == 200
    assert res.get_json()['username'] == 'alice'

    res = client.get('/api/user/getUser/nobody')
    assert res.status_code == 500
    assert res.get_json()['error'] == 'Error when getting user: User not found'

    res = client.get('/api/user/getUsers')
    assert res.status_code == 200
    assert [u['username'] for u in res.get_json()] == ['alice', 'bob']


def test_reset_password(client, make_user):
    make_user('alice', password='password')

    res = client.patch('/api/user/resetPassword', json={'username': 'alice', 'password': 'short'})
    assert res.status_code == 400
    assert 'at least 6 characters' in res.get_json()['error']

    res = client.patch('/api/user/resetPassword', json={'username': 'alice'})
    assert res.status_code == 400

    res = client.patch('/api/user/resetPassword', json={'username': 'alice', 'password': 'new-password'})
    assert res.status_code == 200

    assert client.post('/api/user/login', json={'username': 'alice', 'password': 'password'}).status_code == 401
    assert client.post('/api/user/login', json={'username': 'alice', 'password': 'new-password'}).status_code == 200

    res = client.patch('/api/user/resetPassword', json={'username': 'nobody', 'password': 'new-password'})
    assert res.status_code == 500


def test_update_biography(client, make_user):
    make_user('alice', biography='old')

    res = client.patch('/api/user/updateBiography', json={'username': 'alice', 'biography': 'new bio'})
    assert res.status_code == 200
    assert res.get_json()['biography'] == 'new bio'

    # Clearing the biography is allowed
    res = client.patch('/api/user/updateBiography', json={'username': 'alice', 'biography': ''})
    assert res.status_code == 200
    assert res.get_json()['biography'] == ''

    res = client.patch('/api/user/updateBiography', json={'username': 'alice'})
    assert res.status_code == 400

    res = client.patch('/api/user/updateBiography', json={'username': 'nobody', 'biography': 'x'})
    assert res.status_code == 500


def test_delete_user(client, make_user):
    make_user('alice')
    make_user('bob')
    chat = client.post('/api/chat/createChat', json={'participants': ['alice', 'bob']}).get_json()

    res = client.delete('/api/user/deleteUser/alice')
    assert res.status_code == 200
    assert res.get_json()['username'] == 'alice'

    assert client.get('/api/user/getUser/alice').status_code == 500
    # Chat membership goes with the user
    remaining = client.get(f"/api/chat/{chat['_id']}").get_json()
    assert remaining['participants'] == ['bob']

    res = client.delete('/api/user/deleteUser/alice')
    assert res.status_code == 500


def test_delete_sole_participant_removes_chat(client, make_user):
    make_user('alice')
    make_user('bob')
    solo = client.post('/api/chat/createChat', json={
        'participants': ['alice'],
        'messages': [{'msg': 'note to self', 'msgFrom': 'alice'}],
    }).get_json()
    shared = client.post('/api/chat/createChat', json={'participants': ['alice', 'bob']}).get_json()

    assert client.delete('/api/user/deleteUser/alice').status_code == 200

    res = client.get(f"/api/chat/{solo['_id']}")
    assert res.status_code == 500
    assert res.get_json()['error'] == 'Error retrieving chat: Chat not found'
    assert client.get(f"/api/chat/{shared['_id']}").get_json()['participants'] == ['bob']


@pytest.mark.parametrize('body', [
    {'username': 'alice', 'password': 12345678},
    {'username': 42, 'password': 'password'},
    {'username': 'alice', 'password': ['password']},
    {'username': 'alice', 'password': 'password', 'biography': 5},
])
def test_signup_rejects_non_string_fields(client, body):
    res = client.post('/api/user/signup', json=body)
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Invalid user body'


@pytest.mark.parametrize('body', [
    {'username': 'alice', 'password': 12345678},
    {'username': ['alice'], 'password': 'password'},
])
def test_login_rejects_non_string_fields(client, make_user, body):
    make_user('alice')
    res = client.post('/api/user/login', json=body)
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Invalid login body'


@pytest.mark.parametrize('body', [
    {'username': 'alice', 'password': 12345678},
    {'username': 7, 'password': 'new-password'},
])
def test_reset_password_rejects_non_string_fields(client, make_user, body):
    make_user('alice')
    res = client.patch('/api/user/resetPassword', json=body)
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Invalid user body'


@pytest.mark.parametrize('body', [
    {'username': 'alice', 'biography': 5},
    {'username': 'alice', 'biography': None},
    {'username': {'name': 'alice'}, 'biography': 'bio'},
])
def test_update_biography_rejects_non_string_fields(client, make_user, body):
    make_user('alice')
    res = client.patch('/api/user/updateBiography', json=body)
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Invalid user body'


def test_update_biography_database_failure(client, make_user, monkeypatch):
    make_user('alice', biography='old')

    def failing_commit():
        raise OperationalError('COMMIT', {}, Exception('database is locked'))

    monkeypatch.setattr(db.session, 'commit', failing_commit)
    res = client.patch('/api/user/updateBiography', json={'username': 'alice', 'biography': 'new'})
    assert res.status_code == 500
    assert res.get_json()['error'].startswith('Error when updating user biography: Database error:')

    monkeypatch.undo()
    assert client.get('/api/user/getUser/alice').get_json()['biography'] == 'old'
