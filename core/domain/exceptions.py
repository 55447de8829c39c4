"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""
from datetime import datetime
from typing import Optional


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class MissingFieldError(DomainException):
    """Raised when a required request field is absent or blank."""

    def __init__(self, code: str, message: str = "Required field is missing"):
        super().__init__(message, code=code)


class InvalidFieldError(DomainException):
    """Raised when a request field has an unacceptable value."""

    def __init__(self, code: str, message: str = "Invalid field value"):
        super().__init__(message, code=code)


class UnauthorizedError(DomainException):
    """Raised when an administrative credential is missing or wrong."""

    def __init__(self, message: str = "Invalid administrative credential"):
        super().__init__(message, code="UNAUTHORIZED")


class LicenseException(DomainException):
    """Base exception for license-related errors."""

    pass


class LicenseNotFoundError(LicenseException):
    """Raised when a license is not found."""

    def __init__(self, message: str = "License not found"):
        super().__init__(message, code="LICENSE_NOT_FOUND")


class DuplicateLicenseError(LicenseException):
    """Raised by a store when an insert violates a uniqueness rule."""

    def __init__(self, message: str = "License already exists"):
        super().__init__(message, code="DUPLICATE_LICENSE")


class KeyGenerationFailedError(LicenseException):
    """Raised when no unused license key could be generated."""

    def __init__(self, message: str = "Failed to generate a unique license key"):
        super().__init__(message, code="KEY_GENERATION_FAILED")


class TrialAlreadyActiveError(LicenseException):
    """Raised when an owner already holds a trial that is still running."""

    def __init__(
        self,
        expires_at: Optional[datetime] = None,
        message: str = "An active trial license already exists",
    ):
        super().__init__(message, code="TRIAL_ALREADY_ACTIVE")
        self.expires_at = expires_at


class ConcurrentUpdateError(LicenseException):
    """Raised when a license kept changing underneath a conditional update."""

    def __init__(self, message: str = "License was modified concurrently, please retry"):
        super().__init__(message, code="CONCURRENT_UPDATE")


class BillingException(DomainException):
    """Base exception for invoice-related errors."""

    pass


class InvoiceNotFoundError(BillingException):
    """Raised when an invoice is not found."""

    def __init__(self, message: str = "Invoice not found"):
        super().__init__(message, code="INVOICE_NOT_FOUND")


class DuplicateInvoiceError(BillingException):
    """Raised by a store when an invoice id is already taken."""

    def __init__(self, message: str = "Invoice already exists"):
        super().__init__(message, code="DUPLICATE_INVOICE")


class InvoiceNotPendingError(BillingException):
    """Raised when settling an invoice that was already settled."""

    def __init__(self, message: str = "Invoice is not pending"):
        super().__init__(message, code="INVOICE_NOT_PENDING")


class PaymentInconsistencyError(BillingException):
    """
    Raised when an invoice was marked paid but its license could not be renewed.

    The invoice write is not rolled back; operators reconcile by hand.
    """

    def __init__(self, invoice_id: str, license_key: str, message: str = None):
        super().__init__(
            message
            or f"Invoice {invoice_id} is paid but license {license_key} was not renewed",
            code="PAYMENT_INCONSISTENCY",
        )
        self.invoice_id = invoice_id
        self.license_key = license_key


class StoreUnavailableError(DomainException):
    """Raised when the backing store cannot complete an operation."""

    def __init__(self, message: str = "License store is unavailable"):
        super().__init__(message, code="DATABASE_ERROR")
