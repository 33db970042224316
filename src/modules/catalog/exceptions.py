"""Catalog domain exceptions.

Raised by the orchestration services.  Each kind carries the status it
is reported with; ``modules.core.exceptions.api_exception_handler``
renders them into the structured error body.

- ``EntityNotFound`` (and its per-entity subclasses): 404.
- ``BusinessValidationError``: a request violates an invariant, 400.
- ``CommunicationFailure``: the data service was unreachable or failed, 503.
- ``UnexpectedFailure``: anything else, 500.
"""

from __future__ import annotations

from rest_framework import status

from modules.core.exceptions import DomainError, UnexpectedFailure

__all__ = [
    "BusinessValidationError",
    "CategoryNotFound",
    "CommunicationFailure",
    "EntityNotFound",
    "InventoryNotFound",
    "ProductNotFound",
    "UnexpectedFailure",
]


class EntityNotFound(DomainError):
    """The requested entity does not exist in the data service."""

    status_code = status.HTTP_404_NOT_FOUND
    error = "Not Found"


class ProductNotFound(EntityNotFound):
    """The requested product does not exist."""


class CategoryNotFound(EntityNotFound):
    """The requested category does not exist."""


class InventoryNotFound(EntityNotFound):
    """No inventory record exists for the requested id or product."""


class BusinessValidationError(DomainError):
    """A request violates a business rule; raised before any remote call."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Business Validation Error"


class CommunicationFailure(DomainError):
    """The data service could not be reached or answered with an error."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error = "Service Unavailable"
