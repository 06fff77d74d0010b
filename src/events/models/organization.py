import typing as t

from django.conf import settings
from django.db import models

from common.models import TimeStampedModel


class OrganizationQuerySet(models.QuerySet["Organization"]):
    def owned_by(self, user: t.Any) -> t.Self:
        """Organizations whose owner is the given user."""
        return self.filter(owner=user)


class Organization(TimeStampedModel):
    name = models.CharField(max_length=150, db_index=True)
    slug = models.SlugField(max_length=150, unique=True)
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="owned_organizations")
    logo = models.URLField(max_length=500, blank=True)

    objects = OrganizationQuerySet.as_manager()

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name
