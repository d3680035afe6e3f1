"""Bookings app package.

This app encapsulates the booking lifecycle: direct booking requests,
provider confirmation and decline, customer cancellation, completion and
tour availability checks. Bookings point at a tour, guide or driver through
an entity type and id and keep a snapshot of its display fields.
"""
