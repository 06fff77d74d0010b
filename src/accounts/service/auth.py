"""Authentication service layer."""

import structlog
from django.utils import timezone
from ninja_jwt.schema import TokenObtainPairOutputSchema
from ninja_jwt.tokens import RefreshToken

from accounts.models import GatehouseUser

logger = structlog.get_logger(__name__)


def get_token_pair_for_user(user: GatehouseUser) -> TokenObtainPairOutputSchema:
    """Get a token pair for the user.

    The email claim is only a fallback for tokens whose id claim is unusable.
    """
    user.last_login = timezone.now()
    user.save(update_fields=["last_login"])

    logger.info("token_pair_generated", user_id=str(user.id), email=user.email)
    token = RefreshToken.for_user(user)
    token.payload.update(
        {
            "sub": str(user.id),
            "email": user.email,
            "username": user.username,
            "is_staff": user.is_staff,
        }
    )
    return TokenObtainPairOutputSchema(
        username=user.username,
        access=str(token.access_token),  # type: ignore[attr-defined]
        refresh=str(token),
    )
