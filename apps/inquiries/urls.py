"""URL routing for inquiries."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import InquiryViewSet

router = DefaultRouter()
router.register(r"", InquiryViewSet, basename="inquiry")

urlpatterns = [
    path("", include(router.urls)),
]
