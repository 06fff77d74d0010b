from django.http import HttpRequest
from ninja_extra import ControllerBase
from ninja_extra.permissions import BasePermission

from events import models
from events.service.permissions import can_manage_event


class RootPermission(BasePermission):
    def has_permission(self, request: HttpRequest, controller: ControllerBase) -> bool:
        """Must implement abstract method. This is due to an error in Ninja Extra.

        This Method will be ignored, only has_object_permission will be called.
        """
        return True


class EventManagerPermission(RootPermission):
    def has_object_permission(
        self,
        request: HttpRequest,
        controller: ControllerBase,
        obj: models.Event,
    ) -> bool:
        """Event creator or owner of the event's organization."""
        return can_manage_event(obj, getattr(request.user, "id", None))


class OrganizationOwnerPermission(RootPermission):
    def has_object_permission(
        self,
        request: HttpRequest,
        controller: ControllerBase,
        obj: models.Organization,
    ) -> bool:
        """Only the owner manages an organization."""
        return bool(obj.owner_id == getattr(request.user, "id", None))
