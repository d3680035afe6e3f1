"""Admin registration for inquiries."""

from __future__ import annotations

from django.contrib import admin

from .models import Inquiry, InquiryResponse


class InquiryResponseInline(admin.TabularInline):
    model = InquiryResponse
    extra = 0
    readonly_fields = ("recipient", "status", "message", "responded_at", "created_at")


@admin.register(Inquiry)
class InquiryAdmin(admin.ModelAdmin):
    list_display = ("subject", "user", "target_type", "requires_payment", "expires_at", "created_at")
    list_filter = ("target_type", "requires_payment")
    search_fields = ("subject", "user__email")
    inlines = [InquiryResponseInline]


@admin.register(InquiryResponse)
class InquiryResponseAdmin(admin.ModelAdmin):
    list_display = ("inquiry", "recipient", "status", "responded_at")
    list_filter = ("status",)
    search_fields = ("recipient__email", "inquiry__subject")
