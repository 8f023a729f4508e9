"""API views for worker profiles and browsing."""

from __future__ import annotations

import logging

from django.http import Http404  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.exceptions import APIException, ValidationError  # type: ignore
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.permissions import HasAccountType, HasActiveSubscription, IsWorker, is_platform_admin

from .filters import WorkerOrderingFilter, WorkerProfileFilterSet
from .images import InvalidImageError
from .models import WorkerProfile
from .serializers import (
    ProfileImageSerializer,
    WorkerProfileSerializer,
    WorkerProfileWriteSerializer,
    build_image_url,
)
from .services import WorkerProfileExistsError, create_profile, remove_profile_image, set_profile_image

logger = logging.getLogger(__name__)


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The resource already exists."
    default_code = "conflict"


class WorkerProfileViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """Worker profiles.

    - `GET /workers/` browses active profiles (`category`, `service_area`,
      `rate_min`, `rate_max`, `ordering=hourly_rate|-hourly_rate`)
    - `GET /workers/{user_id}/` and `/workers/{user_id}/image/` read one worker
    - `POST /workers/` creates the caller's profile, `me/` reads or updates it,
      `me/image/` uploads or removes its picture
    """

    queryset = WorkerProfile.objects.select_related("owner")
    lookup_field = "owner"
    lookup_value_regex = r"\d+"
    permission_classes = [permissions.IsAuthenticated, HasAccountType, HasActiveSubscription]
    filter_backends = [DjangoFilterBackend, WorkerOrderingFilter]
    filterset_class = WorkerProfileFilterSet
    ordering_fields = ["hourly_rate", "display_name", "created_at"]
    ordering = ["display_name"]
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def get_permissions(self):  # type: ignore
        if self.action == "create":
            return [permissions.IsAuthenticated(), IsWorker(), HasActiveSubscription()]
        return super().get_permissions()

    def get_serializer_class(self):  # type: ignore
        if self.action in {"create", "me"} and self.request.method != "GET":
            return WorkerProfileWriteSerializer
        if self.action == "me_image":
            return ProfileImageSerializer
        return WorkerProfileSerializer

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if self.action == "list":
            return qs.active()
        return qs

    def get_object(self):  # type: ignore
        profile = super().get_object()
        user = self.request.user
        if not profile.is_active and profile.owner_id != user.pk and not is_platform_admin(user):
            raise Http404
        return profile

    def _own_profile(self, request) -> WorkerProfile:
        profile = WorkerProfile.objects.filter(owner=request.user).first()
        if profile is None:
            raise Http404
        return profile

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = WorkerProfileWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            profile = create_profile(request.user, **serializer.validated_data)
        except WorkerProfileExistsError as exc:
            raise Conflict(str(exc))
        data = WorkerProfileSerializer(profile, context=self.get_serializer_context()).data
        return Response(data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["get", "put", "patch"])
    def me(self, request):
        profile = self._own_profile(request)
        if request.method == "GET":
            return Response(WorkerProfileSerializer(profile, context=self.get_serializer_context()).data)

        serializer = WorkerProfileWriteSerializer(profile, data=request.data, partial=request.method == "PATCH")
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info("Updated worker profile for user %s", request.user.pk)
        return Response(WorkerProfileSerializer(profile, context=self.get_serializer_context()).data)

    @action(detail=False, methods=["post", "delete"], url_path="me/image")
    def me_image(self, request):
        profile = self._own_profile(request)
        if request.method == "DELETE":
            remove_profile_image(profile)
            return Response(status=status.HTTP_204_NO_CONTENT)

        serializer = ProfileImageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            set_profile_image(profile, serializer.validated_data["image"])
        except InvalidImageError as exc:
            raise ValidationError({"image": [str(exc)]})
        return Response({"image_url": build_image_url(profile, request)}, status=status.HTTP_200_OK)

    @action(detail=True, methods=["get"])
    def image(self, request, owner=None):
        profile = self.get_object()
        return Response({"image_url": build_image_url(profile, request)})
