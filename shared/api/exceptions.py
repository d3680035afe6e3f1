"""Translate domain errors into API responses."""

from __future__ import annotations

import logging

from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler  # type: ignore

from shared.domain.exceptions import BadRequestError, DomainError, ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    BadRequestError: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def custom_exception_handler(exc, context):  # type: ignore
    """Render domain errors as ``{"detail", "code"}`` and defer the rest to DRF."""
    if isinstance(exc, DomainError):
        status_code = next(
            (code for error_cls, code in STATUS_BY_ERROR.items() if isinstance(exc, error_cls)),
            status.HTTP_400_BAD_REQUEST,
        )
        view = context.get("view")
        logger.info(
            "Domain error in %s: %s (%s)",
            view.__class__.__name__ if view else "unknown view",
            exc.message,
            exc.code,
        )
        return Response({"detail": exc.message, "code": exc.code}, status=status_code)

    return exception_handler(exc, context)
