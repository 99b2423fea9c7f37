# tests/test_users_api.py
def test_list_users_requires_admin(client, user_headers):
    response = client.get('/api/users', headers=user_headers)
    assert response.status_code == 401
    assert response.json['error'] == 'Unauthorized'

def test_list_users(client, admin_headers, user_account):
    response = client.get('/api/users', headers=admin_headers)
    assert response.status_code == 200

    emails = {user['email'] for user in response.json}
    assert emails == {'admin@example.com', 'user@example.com'}
    for user in response.json:
        assert user['failed_login_count'] == 0
        assert user['locked_until'] is None
        assert 'password_hash' not in user

def test_promote_user(client, admin_headers, user_account):
    response = client.patch('/api/users', headers=admin_headers,
                            json={'userId': user_account.id, 'role': 'Administrator'})
    assert response.status_code == 200
    assert response.json['user']['role'] == 'Administrator'

def test_invalid_role(client, admin_headers, user_account):
    response = client.patch('/api/users', headers=admin_headers,
                            json={'userId': user_account.id, 'role': 'Owner'})
    assert response.status_code == 400

def test_admin_cannot_demote_self(client, admin_headers, admin_account):
    response = client.patch('/api/users', headers=admin_headers,
                            json={'userId': admin_account.id, 'role': 'User'})
    assert response.status_code == 400
    assert response.json['error'] == 'Cannot remove your own administrator role'

def test_unknown_user(client, admin_headers):
    response = client.patch('/api/users', headers=admin_headers, json={'userId': 999, 'role': 'User'})
    assert response.status_code == 404
    assert response.json['error'] == 'User not found'

def test_change_role_rejects_null_fields(client, admin_headers, user_account):
    response = client.patch('/api/users', headers=admin_headers, json={'userId': None, 'role': 'User'})
    assert response.status_code == 400
    response = client.patch('/api/users', headers=admin_headers, json={'userId': user_account.id, 'role': None})
    assert response.status_code == 400
