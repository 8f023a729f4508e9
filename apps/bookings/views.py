"""API views for the booking domain."""

from __future__ import annotations

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.exceptions import PermissionDenied, ValidationError  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.permissions import HasAccountType, HasActiveSubscription, IsClient, is_platform_admin

from .models import Booking
from .serializers import BookingCreateSerializer, BookingSerializer, BookingStatusSerializer
from .services import (
    BookingPermissionError,
    BookingRequestError,
    BookingTransitionError,
    create_booking_request,
    update_booking_status,
)


class BookingViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """Bookings between clients and workers.

    `GET /bookings/` lists the caller's bookings as client and as worker,
    newest first. Admins may read any booking but never change its status.
    """

    queryset = Booking.objects.select_related("client", "worker", "worker__worker_profile")
    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated, HasAccountType, HasActiveSubscription]

    def get_permissions(self):  # type: ignore
        if self.action == "create":
            return [permissions.IsAuthenticated(), IsClient(), HasActiveSubscription()]
        return super().get_permissions()

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        user = self.request.user
        if self.action == "list":
            return qs.involving(user)
        # Status changes resolve any booking so outsiders get 403 from the service
        if self.action == "set_status" or is_platform_admin(user):
            return qs
        return qs.involving(user)

    def _paginated(self, queryset):
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(queryset, many=True).data)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            booking = create_booking_request(
                request.user,
                data["worker"],
                job_details=data["job_details"].strip(),
                date_time=data["date_time"].strip(),
                location=data["location"].strip(),
            )
        except BookingRequestError as exc:
            raise ValidationError({"worker": [str(exc)]})
        read_serializer = self.get_serializer(booking)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, pk=None):
        booking: Booking = self.get_object()  # type: ignore
        serializer = BookingStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            booking = update_booking_status(booking, serializer.validated_data["status"], request.user)
        except BookingPermissionError as exc:
            raise PermissionDenied(str(exc))
        except BookingTransitionError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(self.get_serializer(booking).data)

    @action(detail=False, methods=["get"], url_path="by-status")
    def by_status(self, request):
        """Caller's bookings in one status; admins see every booking."""
        serializer = BookingStatusSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        qs = self.get_queryset().filter(status=serializer.validated_data["status"])
        return self._paginated(qs)

    @action(detail=False, methods=["get"], url_path=r"client/(?P<user_id>\d+)")
    def by_client(self, request, user_id=None):
        return self._paginated(self._for_party(request, int(user_id), "client"))

    @action(detail=False, methods=["get"], url_path=r"worker/(?P<user_id>\d+)")
    def by_worker(self, request, user_id=None):
        return self._paginated(self._for_party(request, int(user_id), "worker"))

    def _for_party(self, request, user_id: int, field: str):
        if user_id != request.user.pk and not is_platform_admin(request.user):
            raise PermissionDenied("You can only view your own bookings.")
        return super().get_queryset().filter(**{f"{field}_id": user_id})
