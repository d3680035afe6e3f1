"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "reference_number",
        "entity_type",
        "entity_name",
        "user",
        "provider_name",
        "status",
        "date",
        "guests",
        "total_price",
        "currency",
        "created_at",
    )
    list_filter = ("status", "entity_type", "currency", "date")
    search_fields = ("reference_number", "entity_name", "provider_name", "user__email")
    readonly_fields = (
        "id",
        "reference_number",
        "entity_type",
        "entity_id",
        "inquiry",
        "total_price",
        "created_at",
        "updated_at",
        "cancelled_at",
    )

    def has_delete_permission(self, request, obj=None):  # type: ignore
        return False
