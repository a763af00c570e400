import pytest
from django.urls import reverse


@pytest.mark.django_db
def test_health_check(client):
    response = client.get(reverse('health-check'))

    assert response.status_code == 200
    assert response.json() == {'status': 'ok', 'database': 'ok'}


def test_health_check_needs_no_token(client, db):
    response = client.get('/api/health/', HTTP_AUTHORIZATION='Bearer not-a-token')

    assert response.status_code == 200
