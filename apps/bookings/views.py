"""API views for the booking domain."""

from __future__ import annotations

import logging

from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.application.message_bus import message_bus

from .application.command_handlers import (
    CancelBookingCommand,
    CompleteBookingCommand,
    ConfirmBookingCommand,
    CreateDirectBookingCommand,
    DeclineBookingCommand,
)
from .application.queries import get_booking_by_id, get_received_bookings, get_user_bookings
from .repositories import BookingFilters, Page
from .serializers import (
    BookingConfirmSerializer,
    BookingCreateSerializer,
    BookingDeclineSerializer,
    BookingListQuerySerializer,
    BookingSerializer,
)

logger = logging.getLogger(__name__)


class BookingViewSet(viewsets.GenericViewSet):
    """Customer and provider booking endpoints.

    Every state change goes through a command on the message bus; business
    failures surface as domain errors rendered by the API exception handler.
    """

    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]
    lookup_value_regex = "[0-9a-fA-F-]{36}"

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BookingCreateSerializer
        if self.action == "confirm":
            return BookingConfirmSerializer
        if self.action == "decline":
            return BookingDeclineSerializer
        return BookingSerializer

    def _page_response(self, result: Page, page: int, limit: int) -> Response:
        total_pages = (result.total_items + limit - 1) // limit
        return Response(
            {
                "items": BookingSerializer(result.items, many=True).data,
                "total_items": result.total_items,
                "page": page,
                "limit": limit,
                "total_pages": total_pages,
            }
        )

    def _list_params(self, request):  # type: ignore
        query = BookingListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data
        filters = BookingFilters(status=data.get("status"), entity_type=data.get("entity_type"))
        return data["page"], data["limit"], filters

    def list(self, request):  # type: ignore
        page, limit, filters = self._list_params(request)
        result = get_user_bookings(request.user.id, page, limit, filters)
        return self._page_response(result, page, limit)

    @action(detail=False, methods=["get"])
    def received(self, request):  # type: ignore
        page, limit, filters = self._list_params(request)
        result = get_received_bookings(request.user.id, page, limit, filters)
        return self._page_response(result, page, limit)

    def retrieve(self, request, pk=None):  # type: ignore
        booking = get_booking_by_id(pk, request.user.id)
        return Response(BookingSerializer(booking).data)

    def create(self, request):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = message_bus.handle_command(
            CreateDirectBookingCommand(customer_id=request.user.id, **serializer.validated_data)
        )
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["patch"])
    def confirm(self, request, pk=None):  # type: ignore
        serializer = BookingConfirmSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = message_bus.handle_command(
            ConfirmBookingCommand(
                booking_id=pk,
                provider_id=request.user.id,
                provider_notes=serializer.validated_data.get("provider_notes"),
            )
        )
        return Response(BookingSerializer(booking).data)

    @action(detail=True, methods=["patch"])
    def decline(self, request, pk=None):  # type: ignore
        serializer = BookingDeclineSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = message_bus.handle_command(
            DeclineBookingCommand(
                booking_id=pk,
                provider_id=request.user.id,
                declined_reason=serializer.validated_data["declined_reason"],
            )
        )
        return Response(BookingSerializer(booking).data)

    @action(detail=True, methods=["patch"])
    def cancel(self, request, pk=None):  # type: ignore
        booking = message_bus.handle_command(CancelBookingCommand(booking_id=pk, requester_id=request.user.id))
        return Response(BookingSerializer(booking).data)

    @action(detail=True, methods=["patch"])
    def complete(self, request, pk=None):  # type: ignore
        booking = message_bus.handle_command(CompleteBookingCommand(booking_id=pk, provider_id=request.user.id))
        return Response(BookingSerializer(booking).data)
