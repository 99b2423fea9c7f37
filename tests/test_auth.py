# tests/test_auth.py
from datetime import timedelta

from flask_jwt_extended import create_access_token, create_refresh_token

def register(client, email='testuser@example.com', password='testpass', **extra):
    return client.post('/api/auth/register', json={'email': email, 'password': password, **extra})

def login(client, email='testuser@example.com', password='testpass'):
    return client.post('/api/auth/login', json={'email': email, 'password': password})

def test_health(client):
    response = client.get('/')
    assert response.status_code == 200
    assert response.json['status'] == 'healthy'

def test_register(client):
    response = register(client)
    assert response.status_code == 201
    assert response.json['message'] == 'User registered successfully'
    assert response.json['user']['email'] == 'testuser@example.com'
    assert response.json['user']['role'] == 'User'
    assert 'access_token' in response.json

def test_register_cannot_self_promote(client):
    response = register(client, role='Administrator')
    assert response.status_code == 201
    assert response.json['user']['role'] == 'User'

def test_register_duplicate_email(client):
    register(client)
    response = register(client)
    assert response.status_code == 409

def test_register_validates_input(client):
    assert register(client, email='not-an-email').status_code == 400
    assert register(client, password='short').status_code == 400
    assert register(client, role='Guest').status_code == 400
    assert client.post('/api/auth/register', json={'email': 'a@b.co'}).status_code == 400

def test_register_rejects_unknown_fields(client):
    response = register(client, full_name='Test User')
    assert response.status_code == 400

def test_login(client):
    register(client)
    response = login(client)
    assert response.status_code == 200
    assert 'access_token' in response.json
    assert response.json['user']['email'] == 'testuser@example.com'

def test_login_wrong_password(client):
    register(client)
    response = login(client, password='wrongpass')
    assert response.status_code == 401
    assert response.json['error'] == 'Invalid credentials'

def test_login_unknown_email_looks_like_wrong_password(client):
    response = login(client, email='nobody@example.com')
    assert response.status_code == 401
    assert response.json['error'] == 'Invalid credentials'

def test_login_lockout(client):
    register(client)
    assert login(client, password='wrongpass').status_code == 401
    assert login(client, password='wrongpass').status_code == 401

    response = login(client, password='wrongpass')
    assert response.status_code == 401
    assert 'locked' in response.json['error']

    response = login(client)
    assert response.status_code == 401
    assert 'locked' in response.json['error']

def test_current_user(client):
    register(client)
    token = login(client).json['access_token']

    response = client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})
    assert response.status_code == 200
    assert response.json['email'] == 'testuser@example.com'
    assert response.json['role'] == 'User'

def test_current_user_requires_token(client):
    assert client.get('/api/auth/me').status_code == 401
    assert client.get('/api/auth/me', headers={'Authorization': 'Token abc'}).status_code == 401

    response = client.get('/api/auth/me', headers={'Authorization': 'Bearer abc'})
    assert response.status_code == 401
    assert response.json['error'] == 'Unauthorized'

def test_login_null_fields(client):
    register(client)
    response = client.post('/api/auth/login', json={'email': 'testuser@example.com', 'password': None})
    assert response.status_code == 400
    response = client.post('/api/auth/login', json={'email': None, 'password': 'testpass'})
    assert response.status_code == 400

def test_register_null_fields(client):
    response = client.post('/api/auth/register', json={'email': None, 'password': 'testpass'})
    assert response.status_code == 400
    response = client.post('/api/auth/register', json={'email': 'testuser@example.com', 'password': None})
    assert response.status_code == 400

def test_empty_password_does_not_count_towards_lockout(client, reload_account):
    user_id = register(client).json['user']['id']
    for _ in range(3):
        response = login(client, password='')
        assert response.status_code == 400
        assert response.json['error'] == 'Email and password are required'

    account = reload_account(user_id)
    assert account.failed_login_count == 0
    assert account.locked_until is None
    assert login(client).status_code == 200

def test_login_empty_email(client):
    response = login(client, email='')
    assert response.status_code == 400

def test_current_user_rejects_expired_token(client, user_account):
    token = create_access_token(
        identity=str(user_account.id),
        additional_claims={'email': user_account.email, 'role': user_account.role},
        expires_delta=timedelta(seconds=-1)
    )
    response = client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})
    assert response.status_code == 401
    assert response.json['error'] == 'Unauthorized'

def test_current_user_rejects_token_without_role_claim(client, user_account):
    token = create_access_token(identity=str(user_account.id), additional_claims={'email': user_account.email})
    assert client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'}).status_code == 401

def test_current_user_rejects_refresh_token(client, user_account):
    token = create_refresh_token(
        identity=str(user_account.id),
        additional_claims={'email': user_account.email, 'role': user_account.role}
    )
    assert client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'}).status_code == 401
