import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from registry.models import AuditEvent, User

pytestmark = pytest.mark.django_db


def register(client, **overrides):
    body = {
        'username': 'maria', 'password': 'secret123', 'email': 'maria@example.com',
        'firstName': 'Maria', 'lastName': 'Gonzalez', 'role': 'PARENT',
    }
    body.update(overrides)
    return client.post(reverse('register_view'), body, format='json')


def test_register_returns_token_pair():
    r = register(APIClient())
    assert r.status_code == 201
    assert r.data['type'] == 'Bearer'
    assert r.data['token'] and r.data['refreshToken']
    assert r.data['role'] == 'PARENT'
    assert User.objects.get(username='maria').check_password('secret123')


def test_register_duplicate_username_and_email():
    client = APIClient()
    assert register(client).status_code == 201
    r = register(client, email='other@example.com')
    assert r.status_code == 409
    assert r.data['message'] == "User already exists with username: 'maria'"
    r = register(client, username='maria2', email='MARIA@example.com')
    assert r.status_code == 409
    assert 'email' in r.data['message']


def test_register_rejects_unknown_role():
    r = register(APIClient(), role='ADMIN')
    assert r.status_code == 400
    assert r.data['error'] == 'Validation Failed'
    assert 'role' in r.data['validationErrors']


def test_login_success_and_bearer_usage(doctor):
    client = APIClient()
    r = client.post(reverse('login_view'), {'username': 'doc', 'password': 'P@ssw0rd1'}, format='json')
    assert r.status_code == 200
    assert r.data['role'] == 'DOCTOR'
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {r.data['token']}")
    me = client.get(reverse('me_view'))
    assert me.status_code == 200
    assert me.data['username'] == 'doc'
    assert me.data['lastLogin'] is not None


def test_login_failure_is_401_and_audited(doctor):
    r = APIClient().post(reverse('login_view'), {'username': 'doc', 'password': 'wrong'}, format='json')
    assert r.status_code == 401
    assert r.data['error'] == 'Unauthorized'
    assert r.data['message'] == 'Invalid username or password'
    assert AuditEvent.objects.filter(action='login', detail__result='fail').exists()


def test_login_ignores_role_in_body(parent):
    r = APIClient().post(reverse('login_view'),
                         {'username': 'parent', 'password': 'P@ssw0rd1', 'role': 'DOCTOR'}, format='json')
    assert r.status_code == 200
    parent.refresh_from_db()
    assert parent.role == 'PARENT'


def test_inactive_user_cannot_log_in(nurse):
    nurse.is_active = False
    nurse.save()
    r = APIClient().post(reverse('login_view'), {'username': 'nurse', 'password': 'P@ssw0rd1'}, format='json')
    assert r.status_code == 401


def test_refresh_rotates_and_logout_blacklists(nurse):
    client = APIClient()
    login = client.post(reverse('login_view'), {'username': 'nurse', 'password': 'P@ssw0rd1'}, format='json')
    refresh = login.data['refreshToken']

    r = client.post(reverse('refresh_view'), {'refreshToken': refresh}, format='json')
    assert r.status_code == 200
    assert r.data['token']
    rotated = r.data['refreshToken']
    assert rotated != refresh

    # The old refresh token was blacklisted by rotation
    assert client.post(reverse('refresh_view'), {'refreshToken': refresh}, format='json').status_code == 401

    client.credentials(HTTP_AUTHORIZATION=f"Bearer {r.data['token']}")
    out = client.post(reverse('logout_view'), {'refreshToken': rotated}, format='json')
    assert out.status_code == 200
    assert out.data['blacklisted'] == 1
    assert client.post(reverse('refresh_view'), {'refreshToken': rotated}, format='json').status_code == 401


def test_missing_token_is_401_with_error_body():
    r = APIClient().get('/api/v1/children')
    assert r.status_code == 401
    assert set(r.data) >= {'timestamp', 'status', 'error', 'message'}
    assert r.data['status'] == 401


def test_garbage_bearer_token_is_401():
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION='Bearer not-a-jwt')
    assert client.get('/api/v1/children').status_code == 401


def test_login_is_rate_limited_per_client(doctor):
    from registry.throttling import LoginRateThrottle

    allowed = LoginRateThrottle().num_requests
    client = APIClient()
    codes = [
        client.post(reverse('login_view'), {'username': 'doc', 'password': 'wrong'}, format='json').status_code
        for _ in range(allowed + 1)
    ]
    assert codes[:allowed] == [401] * allowed
    assert codes[-1] == 429

    # The budget is shared with registration from the same address
    r = register(client)
    assert r.status_code == 429
    assert r.data['error'] == 'Too Many Requests'
