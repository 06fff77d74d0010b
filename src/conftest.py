"""Project-wide fixtures."""

import secrets
import string
import typing as t

import faker
import pytest
from django.core.cache import cache
from django.test.client import Client
from ninja_jwt.tokens import RefreshToken

from accounts.models import GatehouseUser


@pytest.fixture(autouse=True)
def enable_celery_eager_mode(settings: t.Any) -> None:
    """Enable Celery eager mode for tests so tasks execute synchronously.

    This ensures that Celery tasks run immediately in the same process,
    allowing tests to verify their side effects without async complications.
    """
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True


@pytest.fixture(autouse=True)
def clear_cache() -> t.Iterator[None]:
    """Clear the cache around each test.

    Throttle history lives in the cache, so a leftover bucket would leak rate limits between tests.
    """
    cache.clear()
    yield
    cache.clear()


class GatehouseUserFactory:
    """Factory for creating GatehouseUser instances for testing."""

    fake = faker.Faker()

    def create_user(self, **kwargs: t.Any) -> GatehouseUser:
        username = kwargs.pop("username", "".join(secrets.choice(string.ascii_lowercase) for _ in range(8)))
        email = kwargs.pop("email", f"{username}@user.test")
        password = kwargs.pop("password", "password")
        first_name = kwargs.pop("first_name", self.fake.first_name())
        last_name = kwargs.pop("last_name", self.fake.last_name())
        return GatehouseUser.objects.create_user(
            username=username,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            **kwargs,
        )

    def __call__(self, **kwargs: t.Any) -> GatehouseUser:
        return self.create_user(**kwargs)


@pytest.fixture
def user_factory() -> GatehouseUserFactory:
    return GatehouseUserFactory()


@pytest.fixture
def user(user_factory: GatehouseUserFactory) -> GatehouseUser:
    """A standard, non-privileged user."""
    return user_factory(username="testuser", email="testuser@example.com", first_name="Test", last_name="User")


@pytest.fixture
def superuser(user_factory: GatehouseUserFactory) -> GatehouseUser:
    """A superuser."""
    return user_factory(is_superuser=True, is_staff=True)


def client_for(user: GatehouseUser) -> Client:
    """A test client authenticated as the given user with a plain ninja-jwt access token."""
    refresh = RefreshToken.for_user(user)
    return Client(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")  # type: ignore[attr-defined]


@pytest.fixture
def auth_client_factory() -> t.Callable[[GatehouseUser], Client]:
    """Build authenticated clients for arbitrary users."""
    return client_for


@pytest.fixture
def user_client(user: GatehouseUser) -> Client:
    return client_for(user)
