import json
import pytest
from django.contrib.auth.models import User
from django.urls import reverse

@pytest.mark.django_db
class TestTokenRefreshEndpoint:
    """Tests for /api/token/refresh/ endpoint"""

    def _create_admin_and_login(self, client, username='organizer', password='StrongPass123!'):
        """Creates a staff user and performs login to obtain cookies"""
        User.objects.create_user(username=username, password=password, is_staff=True)
        login_url = reverse('api-login')
        resp = client.post(login_url, data={'username': username, 'password': password}, content_type='application/json')
        assert resp.status_code == 200, f'Login failed: {resp.status_code} {resp.content}'
        assert 'access_token' in resp.cookies
        assert 'refresh_token' in resp.cookies
        return resp

    def test_refresh_success_sets_new_access_cookie_and_returns_token(self, client):
        """Given a valid refresh cookie, 200 with body {'detail':'Token refreshed','access':...} and a new access cookie is set"""
        login_resp = self._create_admin_and_login(client)
        client.cookies['refresh_token'] = login_resp.cookies['refresh_token'].value
        url = reverse('api-token-refresh')
        resp = client.post(url, data={}, content_type='application/json')
        assert resp.status_code == 200
        data = json.loads(resp.content.decode())
        assert data['detail'] == 'Token refreshed'
        assert isinstance(data['access'], str) and len(data['access']) > 0
        assert resp.cookies['access_token'].value == data['access']

    def test_refresh_missing_cookie_returns_401(self, client):
        """Given no refresh cookie, 401 with an explanatory message is returned"""
        resp = client.post(reverse('api-token-refresh'), data={}, content_type='application/json')
        assert resp.status_code == 401
        assert 'missing' in json.loads(resp.content.decode())['detail'].lower()

    def test_refresh_invalid_cookie_returns_401(self, client):
        """Given an invalid refresh cookie, 401 with 'Invalid refresh token.' is returned"""
        client.cookies['refresh_token'] = 'not-a-valid-jwt'
        resp = client.post(reverse('api-token-refresh'), data={}, content_type='application/json')
        assert resp.status_code == 401
        assert json.loads(resp.content.decode())['detail'] == 'Invalid refresh token.'

    def test_refresh_refused_for_demoted_admin(self, client):
        """A refresh token of a user who lost staff rights no longer yields access tokens"""
        login_resp = self._create_admin_and_login(client)
        User.objects.filter(username='organizer').update(is_staff=False)
        client.cookies['refresh_token'] = login_resp.cookies['refresh_token'].value
        resp = client.post(reverse('api-token-refresh'), data={}, content_type='application/json')
        assert resp.status_code == 401
        assert 'access_token' not in resp.cookies
