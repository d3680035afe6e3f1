"""App configuration for inquiries."""

from __future__ import annotations

from django.apps import AppConfig  # type: ignore


class InquiriesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.inquiries"
    verbose_name = "Inquiries"

    def ready(self) -> None:
        from . import handlers  # noqa: F401
