import typing as t

from ninja_extra import ControllerBase

from accounts.models import GatehouseUser


class UserAwareController(ControllerBase):
    def user(self) -> GatehouseUser:
        """Get the user for this request."""
        return t.cast(GatehouseUser, self.context.request.user)  # type: ignore[union-attr]
