import uuid

from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models


class GatehouseUserQueryset(models.QuerySet["GatehouseUser"]):
    """Queryset for GatehouseUser."""

    def search(self, q: str) -> "GatehouseUserQueryset":
        """Case-insensitive substring match over the contact and name fields."""
        return self.filter(
            models.Q(email__icontains=q)
            | models.Q(username__icontains=q)
            | models.Q(phone__icontains=q)
            | models.Q(first_name__icontains=q)
            | models.Q(last_name__icontains=q)
        )


class GatehouseUserManager(UserManager["GatehouseUser"]):
    def get_queryset(self) -> GatehouseUserQueryset:
        """Get queryset for GatehouseUser."""
        return GatehouseUserQueryset(self.model, using=self._db)


class GatehouseUser(AbstractUser):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    phone = models.CharField(max_length=32, blank=True, db_index=True, help_text="Phone number")
    image = models.URLField(max_length=500, blank=True, help_text="Avatar URL")

    objects = GatehouseUserManager()  # type: ignore[misc]

    class Meta:
        ordering = ["username"]

    def get_display_name(self) -> str:
        """Full name, then username, then email, then a generic placeholder."""
        full_name = f"{self.first_name.strip()} {self.last_name.strip()}".strip()
        return full_name or self.username or self.email or "Guest"
