import pytest
from django.core.cache import cache


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(username='owner', password='secret')


@pytest.fixture
def auth_client(client, user):
    client.force_login(user)
    return client
