"""
Handler wiring for the v1 API.

Handlers are built per request from the shared repositories and the
current settings.
"""

from django.conf import settings

from billing.application.handlers.invoice_handlers import (
    CreateInvoiceHandler,
    PayInvoiceHandler,
)
from core.domain.value_objects import RenewalMode
from core.infrastructure.stores import get_invoice_repository, get_license_repository
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.application.handlers.issue_trial_handler import IssueTrialHandler
from licenses.application.handlers.license_lifecycle_handlers import (
    RenewLicenseHandler,
    SuspendLicenseHandler,
)
from licenses.application.handlers.list_licenses_handler import (
    ListActiveTrialsHandler,
    ListLicensesHandler,
)
from licenses.application.handlers.verify_license_handler import VerifyLicenseHandler
from licenses.domain.services import LicenseKeyGenerator


def renewal_mode() -> RenewalMode:
    return RenewalMode(settings.LICENSE_RENEWAL_MODE)


def key_generator() -> LicenseKeyGenerator:
    return LicenseKeyGenerator(settings.LICENSE_KEY_PREFIX)


def verify_license_handler() -> VerifyLicenseHandler:
    return VerifyLicenseHandler(get_license_repository())


def issue_license_handler() -> IssueLicenseHandler:
    return IssueLicenseHandler(
        get_license_repository(),
        key_generator=key_generator(),
        default_days=settings.DEFAULT_LICENSE_DAYS,
    )


def issue_trial_handler() -> IssueTrialHandler:
    return IssueTrialHandler(
        get_license_repository(),
        key_generator=key_generator(),
        trial_days=settings.TRIAL_DAYS,
        download_link=settings.TRIAL_DOWNLOAD_LINK,
    )


def suspend_license_handler() -> SuspendLicenseHandler:
    return SuspendLicenseHandler(get_license_repository())


def renew_license_handler() -> RenewLicenseHandler:
    return RenewLicenseHandler(
        get_license_repository(),
        default_days=settings.DEFAULT_LICENSE_DAYS,
        renewal_mode=renewal_mode(),
    )


def list_licenses_handler() -> ListLicensesHandler:
    return ListLicensesHandler(get_license_repository())


def list_active_trials_handler() -> ListActiveTrialsHandler:
    return ListActiveTrialsHandler(get_license_repository())


def create_invoice_handler() -> CreateInvoiceHandler:
    return CreateInvoiceHandler(
        get_invoice_repository(),
        get_license_repository(),
        default_due_days=settings.INVOICE_DUE_DAYS,
    )


def pay_invoice_handler() -> PayInvoiceHandler:
    return PayInvoiceHandler(
        get_invoice_repository(),
        get_license_repository(),
        renewal_days=settings.INVOICE_RENEWAL_DAYS,
        renewal_mode=renewal_mode(),
    )
