"""API views for inquiries."""

from __future__ import annotations

from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from . import services
from .serializers import (
    InquiryCreateSerializer,
    InquiryListQuerySerializer,
    InquiryRespondSerializer,
    InquiryResponseSerializer,
    InquirySerializer,
    ReceivedInquirySerializer,
)


class InquiryViewSet(viewsets.GenericViewSet):
    """Send inquiries, read them and answer the ones you received."""

    serializer_class = InquirySerializer
    permission_classes = [permissions.IsAuthenticated]
    lookup_value_regex = "[0-9a-fA-F-]{36}"

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return InquiryCreateSerializer
        if self.action == "respond":
            return InquiryRespondSerializer
        if self.action == "received":
            return ReceivedInquirySerializer
        return InquirySerializer

    def _list_params(self, request):  # type: ignore
        query = InquiryListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = dict(query.validated_data)
        return data.pop("page"), data.pop("limit"), data

    def _page_response(self, items, total_items: int, page: int, limit: int) -> Response:  # type: ignore
        return Response(
            {
                "items": items,
                "total_items": total_items,
                "page": page,
                "limit": limit,
                "total_pages": (total_items + limit - 1) // limit,
            }
        )

    def list(self, request):  # type: ignore
        page, limit, filters = self._list_params(request)
        result = services.get_user_inquiries(request.user.id, page, limit, filters)
        return self._page_response(InquirySerializer(result.items, many=True).data, result.total_items, page, limit)

    @action(detail=False, methods=["get"])
    def received(self, request):  # type: ignore
        page, limit, filters = self._list_params(request)
        result = services.get_received_inquiries(request.user.id, page, limit, filters)
        return self._page_response(
            ReceivedInquirySerializer(result.items, many=True).data, result.total_items, page, limit
        )

    def retrieve(self, request, pk=None):  # type: ignore
        inquiry = services.get_inquiry_by_id(pk, request.user.id)
        return Response(InquirySerializer(inquiry).data)

    def create(self, request):  # type: ignore
        serializer = InquiryCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        inquiry = services.create_inquiry(user_id=request.user.id, **serializer.validated_data)
        return Response(InquirySerializer(inquiry).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def respond(self, request, pk=None):  # type: ignore
        serializer = InquiryRespondSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        response = services.respond_to_inquiry(
            pk,
            request.user.id,
            serializer.validated_data["status"],
            serializer.validated_data.get("message"),
        )
        return Response(InquiryResponseSerializer(response).data)
