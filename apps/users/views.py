"""User API views: onboarding profile, roles and the admin user console."""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model  # type: ignore
from django.shortcuts import get_object_or_404  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from .models import AdminRoleChange
from .permissions import IsPlatformAdmin
from .serializers import (
    AdminRoleChangeSerializer,
    BootstrapAdminSerializer,
    RoleAssignmentSerializer,
    UserProfileEntrySerializer,
    UserProfileSerializer,
    UserSerializer,
)
from .services import (
    RoleChangeError,
    admin_count,
    bootstrap_admin,
    can_revoke_admin,
    set_admin_role,
)

logger = logging.getLogger(__name__)

User = get_user_model()


def _profile_payload(user):
    if not user.has_profile:
        return None
    return {"name": user.name, "account_type": user.account_type or None}


class UserViewSet(viewsets.ReadOnlyModelViewSet):
    """User management.

    - `me`, `me/profile`, `me/role` operate on the caller
    - `{id}/profile` exposes the public profile of any user
    - listing, search and role changes are reserved for admins
    """

    queryset = User.objects.all().order_by("-date_joined", "-id")

    def get_permissions(self):  # type: ignore
        if self.action in {"list", "retrieve", "search", "set_role", "role_changes"}:
            return [permissions.IsAuthenticated(), IsPlatformAdmin()]
        return [permissions.IsAuthenticated()]

    def get_serializer_class(self):  # type: ignore
        if self.action == "list":
            return UserProfileEntrySerializer
        return UserSerializer

    @action(detail=False, methods=["get"])
    def me(self, request):
        """Returns the caller's account."""
        return Response(UserSerializer(request.user).data)

    @action(detail=False, methods=["get", "put"], url_path="me/profile")
    def my_profile(self, request):
        """Reads or saves the caller's onboarding profile (`null` until onboarded)."""
        user = request.user
        if request.method == "GET":
            return Response(_profile_payload(user))

        serializer = UserProfileSerializer(user, data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info("Saved profile for user %s (account type %s)", user.pk, user.account_type)
        return Response(_profile_payload(user), status=status.HTTP_200_OK)

    @action(detail=False, methods=["get"], url_path="me/role")
    def my_role(self, request):
        """Caller's role with the current number of admins."""
        user = request.user
        is_admin = user.is_platform_admin()
        return Response(
            {
                "user": user.pk,
                "role": User.Role.ADMIN if is_admin else User.Role.USER,
                "is_admin": is_admin,
                "admin_count": admin_count(),
                "can_revoke_admin": can_revoke_admin(),
            }
        )

    @action(detail=True, methods=["get"])
    def profile(self, request, pk=None):
        """Public profile of a user, `null` when they have not onboarded."""
        user = get_object_or_404(User, pk=pk, is_active=True)
        return Response(_profile_payload(user))

    @action(detail=False, methods=["get"])
    def search(self, request):
        """Find one user by id or e-mail.

        GET /api/v1/users/search/?q=<id or e-mail>
        """
        text = (request.query_params.get("q") or "").strip()
        if not text:
            return Response({"q": ["Please enter a user id or e-mail."]}, status=status.HTTP_400_BAD_REQUEST)

        if "@" in text:
            user = User.objects.filter(email__iexact=text).first()
        elif text.isdigit():
            user = User.objects.filter(pk=int(text)).first()
        else:
            return Response({"q": ["Invalid user id format."]}, status=status.HTTP_400_BAD_REQUEST)

        if user is None:
            return Response(None)
        return Response(UserProfileEntrySerializer(user).data)

    @action(detail=True, methods=["post"], url_path="role")
    def set_role(self, request, pk=None):
        """Grant or revoke the admin role for a user."""
        target = self.get_object()
        serializer = RoleAssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        make_admin = serializer.validated_data["role"] == User.Role.ADMIN

        try:
            change = set_admin_role(target, make_admin, changed_by=request.user)
        except RoleChangeError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(AdminRoleChangeSerializer(change).data, status=status.HTTP_200_OK)

    @action(detail=False, methods=["get"], url_path="role-changes")
    def role_changes(self, request):
        """Audit log of admin role changes, newest first."""
        queryset = AdminRoleChange.objects.select_related("user", "changed_by")
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(AdminRoleChangeSerializer(page, many=True).data)
        return Response(AdminRoleChangeSerializer(queryset, many=True).data)

    @action(detail=False, methods=["post"], url_path="bootstrap-admin")
    def claim_admin(self, request):
        """Claims the first admin role with the deployment bootstrap token."""
        serializer = BootstrapAdminSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        granted = bootstrap_admin(request.user, serializer.validated_data["token"])
        return Response({"granted": granted})
