"""App configuration for the booking domain."""

from __future__ import annotations

from django.apps import AppConfig  # type: ignore


class BookingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.bookings"
    verbose_name = "Bookings"

    def ready(self) -> None:
        from shared.application.message_bus import message_bus

        from .application.command_handlers import COMMAND_HANDLERS
        from .repositories import booking_repo

        for command_type, handler_cls in COMMAND_HANDLERS.items():
            if not message_bus.has_command_handler(command_type):
                message_bus.register_command_handler(command_type, handler_cls(booking_repo).handle)
