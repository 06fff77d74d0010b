import typing as t

import pytest

pytestmark = pytest.mark.django_db


@pytest.mark.parametrize(
    ("fields", "expected"),
    [
        ({"first_name": " Ada ", "last_name": " Lovelace "}, "Ada Lovelace"),
        ({"first_name": "Ada", "last_name": ""}, "Ada"),
        ({"first_name": " ", "last_name": ""}, "ada"),
        ({"first_name": "", "last_name": "", "username": ""}, "ada@example.com"),
        ({"first_name": "", "last_name": "", "username": "", "email": ""}, "Guest"),
    ],
    ids=["full-name-trimmed", "first-name-only", "username", "email", "placeholder"],
)
def test_get_display_name(user_factory: t.Any, fields: dict[str, str], expected: str) -> None:
    user = user_factory(username="ada", email="ada@example.com")
    for name, value in fields.items():
        setattr(user, name, value)

    assert user.get_display_name() == expected
