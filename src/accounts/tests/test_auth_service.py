import pytest
from ninja_jwt.tokens import AccessToken

from accounts.models import GatehouseUser
from accounts.service.auth import get_token_pair_for_user

pytestmark = pytest.mark.django_db


def test_get_token_pair_for_user_carries_email_claim(user: GatehouseUser) -> None:
    pair = get_token_pair_for_user(user)

    access = AccessToken(pair.access)
    assert access["email"] == user.email
    assert access["sub"] == str(user.id)
    user.refresh_from_db()
    assert user.last_login is not None
