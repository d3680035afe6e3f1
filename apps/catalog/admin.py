"""Admin registration for catalog entities."""

from __future__ import annotations

from django.contrib import admin

from .models import Company, Driver, Guide, Tour


@admin.register(Tour)
class TourAdmin(admin.ModelAdmin):
    list_display = ("title", "owner", "is_active", "price", "currency", "availability_type", "max_people")
    list_filter = ("is_active", "availability_type", "currency")
    search_fields = ("title", "owner__email")


class ProviderProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "avg_response_time_minutes", "response_count", "created_at")
    search_fields = ("user__email", "user__first_name", "user__last_name")
    readonly_fields = ("avg_response_time_minutes", "response_count")


@admin.register(Guide)
class GuideAdmin(ProviderProfileAdmin):
    list_display = ("user", "is_available", "price_per_day", "avg_response_time_minutes", "response_count")


@admin.register(Driver)
class DriverAdmin(ProviderProfileAdmin):
    list_display = ("user", "is_available", "avg_response_time_minutes", "response_count")


@admin.register(Company)
class CompanyAdmin(ProviderProfileAdmin):
    list_display = ("company_name", "user", "avg_response_time_minutes", "response_count")
    search_fields = ("company_name", "user__email")
