"""Identity resolution.

User references reach the API in more than one spelling: the canonical
hyphenated lowercase UUID, and legacy spellings that older clients and tokens
still carry (bare 32-hex, upper case, braces, ``urn:uuid:``). Everything that
persists a user reference stores the canonical form, so every reference goes
through :func:`parse_user_ref` or :func:`resolve_user` first.
"""

import typing as t
from dataclasses import dataclass
from uuid import UUID

import structlog

from accounts.models import GatehouseUser

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CanonicalId:
    """A user id already in canonical form."""

    value: UUID

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class LegacyStringId:
    """A user id in a legacy spelling, with the canonical UUID it denotes."""

    raw: str
    value: UUID

    def canonical(self) -> CanonicalId:
        """Normalize to the canonical form."""
        return CanonicalId(self.value)

    def __str__(self) -> str:
        return str(self.value)


UserRef = CanonicalId | LegacyStringId


def parse_user_ref(raw: t.Any) -> UserRef | None:
    """Classify a raw identifier.

    Returns None when the value is not an identifier at all.
    """
    if isinstance(raw, UUID):
        return CanonicalId(raw)
    if not isinstance(raw, str):
        return None
    candidate = raw.strip()
    try:
        value = UUID(candidate)
    except ValueError:
        return None
    if candidate == str(value):
        return CanonicalId(value)
    return LegacyStringId(raw=raw, value=value)


def resolve_user(*, email: str | None = None, raw_id: t.Any = None) -> GatehouseUser | None:
    """Resolve the acting user from the signed user id claim, falling back to the email claim.

    Emails are not unique, so the email claim is only used when the token carries no usable id,
    and then only when exactly one user has that email. When both claims are present and the
    email belongs to other users but not to the id's user, the claims conflict and nobody resolves.
    """
    ref = parse_user_ref(raw_id)
    if ref is None:
        if not email:
            return None
        matches = list(GatehouseUser.objects.filter(email=email)[:2])
        if len(matches) != 1:
            logger.info("email_claim_ambiguous_or_unknown", matches=len(matches))
            return None
        return matches[0]

    if isinstance(ref, LegacyStringId):
        logger.debug("legacy_user_id_normalized", raw=ref.raw, user_id=str(ref.value))
    user = GatehouseUser.objects.filter(pk=ref.value).first()
    if user is None or not email or user.email == email:
        return user
    if GatehouseUser.objects.filter(email=email).exists():
        logger.warning("token_claims_conflict", user_id=str(user.id))
        return None
    return user
