"""API views for catalog entities."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.bookings.serializers import AvailabilityQuerySerializer
from apps.bookings.services import check_tour_availability


class TourAvailabilityView(APIView):
    """Can N guests join the tour on a given date?"""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, tour_id):  # type: ignore
        query = AvailabilityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        result = check_tour_availability(
            tour_id,
            query.validated_data["date"],
            query.validated_data["guests"],
        )
        return Response(result.to_dict())
