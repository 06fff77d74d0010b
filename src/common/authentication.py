import typing as t

import structlog
from django.utils.translation import gettext_lazy as _
from ninja_jwt.authentication import JWTAuth
from ninja_jwt.exceptions import AuthenticationFailed
from ninja_jwt.settings import api_settings

from accounts.models import GatehouseUser
from accounts.service.identity import resolve_user

logger = structlog.get_logger(__name__)


class GatehouseJWTAuth(JWTAuth):
    """JWT authentication that resolves the acting user through the identity resolver.

    The signed user id claim decides who the user is; the email claim is
    only a fallback for tokens without a usable id, and a conflicting email
    claim rejects the token. Legacy id spellings carried by older tokens
    resolve to the canonical user.

    Usage:
        @api_controller("/events", auth=GatehouseJWTAuth())
        class EventController:
            ...
    """

    def get_user(self, validated_token: t.Any) -> GatehouseUser:
        """Resolve the canonical user for a validated token.

        Raises:
            AuthenticationFailed: If no active user can be resolved.
        """
        email = validated_token.get("email")
        raw_id = validated_token.get(api_settings.USER_ID_CLAIM)
        user = resolve_user(email=email, raw_id=raw_id)
        if user is None:
            logger.info("token_user_unresolved", has_email=bool(email))
            raise AuthenticationFailed(_("User not found"))
        if not user.is_active:
            raise AuthenticationFailed(_("User is inactive"))
        structlog.contextvars.bind_contextvars(user_id=str(user.id))
        return user
