from typing import Any, Optional


class BaseAPIException(Exception):
    """
    Base exception for all API errors.

    Provides consistent structure with status_code, error_code, and details.
    """

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.details = details or {}


class ValidationException(BaseAPIException):
    """Invalid input data (HTTP 422)."""

    status_code = 422
    error_code = "VALIDATION_ERROR"


class BusinessException(BaseAPIException):
    """Business rule violation (HTTP 409)."""

    status_code = 409
    error_code = "BUSINESS_RULE_VIOLATION"


class ConflictException(BusinessException):
    """Uniqueness constraint violated (HTTP 409)."""

    error_code = "CONFLICT"


class NotFoundException(BaseAPIException):
    """Resource not found (HTTP 404)."""

    status_code = 404
    error_code = "RESOURCE_NOT_FOUND"


# Domain-specific exceptions
class MetadataValidationException(ValidationException):
    """Release, track or artist metadata failed one or more rules."""

    error_code = "METADATA_INVALID"

    def __init__(self, entity_type: str, errors: list[str], warnings: list[str], score: int):
        super().__init__(
            message=f"Metadata validation failed for {entity_type}",
            details={
                "entity_type": entity_type,
                "errors": errors,
                "warnings": warnings,
                "score": score,
            },
        )


class PaymentDetailsException(ValidationException):
    """Payment method unknown or payment details incomplete."""

    error_code = "PAYOUT_INVALID_PAYMENT_DETAILS"

    def __init__(self, payment_method: str, errors: list[str]):
        super().__init__(
            message="Invalid payment details",
            details={"payment_method": payment_method, "errors": errors},
        )


class InvalidStatementLinkException(ValidationException):
    """Payout references statements that do not exist or belong to another user."""

    error_code = "PAYOUT_INVALID_STATEMENTS"

    def __init__(self, user_id: str, statement_ids: list[int]):
        super().__init__(
            message="Statements not found for user",
            details={"user_id": user_id, "statement_ids": statement_ids},
        )


class AllocationExceededException(BusinessException):
    """Split would push the scope's allocation above 100%."""

    error_code = "SPLIT_ALLOCATION_EXCEEDED"

    def __init__(
        self,
        scope_type: str,
        scope_id: int,
        split_type: str,
        available_basis_points: int,
        requested_basis_points: int,
    ):
        available = f"{available_basis_points / 100:.1f}"
        super().__init__(
            message=f"Split allocation would exceed 100%. Available: {available}%",
            details={
                "scope_type": scope_type,
                "scope_id": scope_id,
                "split_type": split_type,
                "available_basis_points": available_basis_points,
                "requested_basis_points": requested_basis_points,
                "available_percentage": available,
            },
        )


class InsufficientBalanceException(BusinessException):
    """Payout amount exceeds available balance."""

    error_code = "PAYOUT_INSUFFICIENT_BALANCE"

    def __init__(self, user_id: str, currency: str, available: int, requested: int):
        super().__init__(
            message="Insufficient balance for payout",
            details={
                "user_id": user_id,
                "currency": currency,
                "available_cents": available,
                "requested_cents": requested,
            },
        )


class InvalidStateTransitionException(NotFoundException):
    """Entity missing, not owned by the caller, or not in the required status.

    All three cases share one error so callers cannot probe for existence.
    """

    error_code = "NOT_FOUND_OR_INVALID_STATE"

    def __init__(self, entity: str, entity_id: int, required_status: str):
        super().__init__(
            message=f"{entity.capitalize()} not found or not {required_status}",
            details={
                "entity": entity,
                "id": entity_id,
                "required_status": required_status,
            },
        )


class DuplicateStatementException(ConflictException):
    """A statement already exists for the artist, platform and period."""

    error_code = "STATEMENT_DUPLICATE"

    def __init__(self, artist_id: int, platform: str, period_start: str, period_end: str):
        super().__init__(
            message="Statement already exists for this artist, platform and period",
            details={
                "artist_id": artist_id,
                "platform": platform,
                "period_start": period_start,
                "period_end": period_end,
            },
        )


class DuplicateCodeException(ConflictException):
    """UPC or ISRC already assigned to another release or track."""

    error_code = "CATALOG_DUPLICATE_CODE"

    def __init__(self, field: str, value: str):
        super().__init__(
            message=f"{field.upper()} must be unique: {value}",
            details={"field": field, "value": value},
        )


class UserNotFoundException(NotFoundException):
    error_code = "USER_NOT_FOUND"

    def __init__(self, user_id: str):
        super().__init__(
            message=f"User not found: {user_id}",
            details={"user_id": user_id},
        )


class EntityNotFoundException(NotFoundException):
    """Artist, release, track, split or statement ID not found in database."""

    def __init__(self, entity: str, entity_id: int):
        super().__init__(
            message=f"{entity.capitalize()} not found: {entity_id}",
            error_code=f"{entity.upper()}_NOT_FOUND",
            details={f"{entity}_id": entity_id},
        )
