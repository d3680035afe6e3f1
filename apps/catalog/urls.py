"""URL routing for catalog entities."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import TourAvailabilityView

urlpatterns = [
    path("<uuid:tour_id>/availability/", TourAvailabilityView.as_view(), name="tour-availability"),
]
