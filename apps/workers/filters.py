"""FilterSet and ordering for browsing worker profiles."""

from __future__ import annotations

import django_filters  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore

from .models import WorkerProfile


class WorkerProfileFilterSet(django_filters.FilterSet):
    category = django_filters.ChoiceFilter(choices=WorkerProfile.Category.choices)
    service_area = django_filters.CharFilter(field_name="service_area", lookup_expr="icontains")
    rate_min = django_filters.NumberFilter(field_name="hourly_rate", lookup_expr="gte")
    rate_max = django_filters.NumberFilter(field_name="hourly_rate", lookup_expr="lte")

    class Meta:
        model = WorkerProfile
        fields = ["category", "service_area"]


class WorkerOrderingFilter(OrderingFilter):
    """Ordering that always breaks ties by display name."""

    tie_breakers = ("display_name", "owner_id")

    def get_ordering(self, request, queryset, view):  # type: ignore
        ordering = list(super().get_ordering(request, queryset, view) or [])
        for field in self.tie_breakers:
            if field not in ordering and f"-{field}" not in ordering:
                ordering.append(field)
        return ordering
