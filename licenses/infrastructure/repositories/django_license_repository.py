"""
Django implementation of LicenseRepository port.

This adapter converts between domain entities and Django ORM models.
"""
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from asgiref.sync import sync_to_async
from django.db import transaction
from django.db.models import Count

from core.domain.exceptions import DuplicateLicenseError, LicenseNotFoundError
from core.domain.value_objects import LicenseStatus, LicenseTier
from core.infrastructure.database import store_errors, translate_store_errors
from licenses.domain.license import License
from licenses.infrastructure.models import License as LicenseModel
from licenses.ports.license_repository import LicenseRepository


class DjangoLicenseRepository(LicenseRepository):
    """
    Django ORM implementation of LicenseRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to Django model fields
    3. Translates database failures into domain exceptions
    """

    def _to_domain(self, model: LicenseModel) -> License:
        """
        Convert Django model to domain entity.

        Args:
            model: Django License model

        Returns:
            License domain entity
        """
        return License(
            key=model.key,
            owner_id=model.owner_id,
            owner_name=model.owner_name,
            tier=LicenseTier(model.tier),
            status=LicenseStatus(model.status),
            price=Decimal(model.price),
            currency=model.currency,
            created_at=model.created_at,
            expires_at=model.expires_at,
            features=tuple(model.features or ()),
            email=model.email or None,
            last_verified=model.last_verified,
            notes=model.notes,
            invoice_count=model.invoice_count,
            last_payment_date=model.last_payment_date,
        )

    def _to_fields(self, license: License) -> dict:
        """
        Convert domain entity to model field values.

        Args:
            license: License domain entity

        Returns:
            Dict of Django License model fields
        """
        return {
            "owner_id": license.owner_id,
            "owner_name": license.owner_name,
            "email": license.email,
            "tier": license.tier.value,
            "status": license.status.value,
            "price": license.price,
            "currency": license.currency,
            "features": list(license.features),
            "created_at": license.created_at,
            "expires_at": license.expires_at,
            "last_verified": license.last_verified,
            "notes": license.notes,
            "invoice_count": license.invoice_count,
            "last_payment_date": license.last_payment_date,
        }

    @sync_to_async
    @translate_store_errors
    def get(self, key: str) -> Optional[License]:
        """
        Find a license by its key.

        Args:
            key: License key

        Returns:
            License entity or None if not found
        """
        try:
            return self._to_domain(LicenseModel.objects.get(key=key))
        except LicenseModel.DoesNotExist:
            return None

    @sync_to_async
    @translate_store_errors
    def exists(self, key: str) -> bool:
        return LicenseModel.objects.filter(key=key).exists()

    @sync_to_async
    def add(self, license: License) -> License:
        """
        Insert a new license.

        The insert runs in its own savepoint so a uniqueness violation
        leaves any surrounding transaction usable.

        Args:
            license: License entity to insert

        Returns:
            Inserted license entity
        """
        with store_errors(
            lambda: DuplicateLicenseError(f"License {license.key} conflicts with an existing record")
        ):
            with transaction.atomic():
                model = LicenseModel.objects.create(key=license.key, **self._to_fields(license))
        return self._to_domain(model)

    def _guard(self, license: License) -> dict:
        """Lookup matching the stored record only while it is still ``license``."""
        return {
            "key": license.key,
            "status": license.status.value,
            "expires_at": license.expires_at,
            "invoice_count": license.invoice_count,
            "notes": license.notes,
        }

    @sync_to_async
    def update_if_unchanged(self, current: License, updated: License) -> bool:
        """
        Write ``updated`` if the stored record still matches ``current``.

        The guard and the write are one UPDATE statement, so a transition
        computed from a stale read never lands.

        Args:
            current: The license as it was read
            updated: The transitioned license to store

        Returns:
            True if the row was updated
        """
        if current.key != updated.key:
            raise ValueError("Cannot change a license key")
        fields = self._to_fields(updated)
        del fields["last_verified"]
        with store_errors(
            lambda: DuplicateLicenseError(f"License {updated.key} conflicts with an existing record")
        ):
            with transaction.atomic():
                updated_rows = LicenseModel.objects.filter(**self._guard(current)).update(**fields)
                missing = not updated_rows and not LicenseModel.objects.filter(
                    key=current.key
                ).exists()
        if missing:
            raise LicenseNotFoundError(f"License {current.key} not found")
        return bool(updated_rows)

    @sync_to_async
    @translate_store_errors
    def record_verification(self, key: str, verified_at: datetime) -> bool:
        return bool(
            LicenseModel.objects.filter(key=key, status=LicenseStatus.ACTIVE.value).update(
                last_verified=verified_at
            )
        )

    @sync_to_async
    @translate_store_errors
    def expire_if_active(self, key: str, expires_at: datetime) -> bool:
        return bool(
            LicenseModel.objects.filter(
                key=key, status=LicenseStatus.ACTIVE.value, expires_at=expires_at
            ).update(status=LicenseStatus.EXPIRED.value)
        )

    @sync_to_async
    @translate_store_errors
    def find_by_owner_and_tier(
        self,
        owner_id: str,
        tier: LicenseTier,
        status: Optional[LicenseStatus] = None,
    ) -> List[License]:
        """
        Find an owner's licenses of one tier, newest first.

        Args:
            owner_id: Owner identifier
            tier: License tier
            status: Optional status filter

        Returns:
            List of License entities
        """
        queryset = LicenseModel.objects.filter(owner_id=owner_id, tier=tier.value)
        if status is not None:
            queryset = queryset.filter(status=status.value)
        return [self._to_domain(model) for model in queryset.order_by("-created_at")]

    @sync_to_async
    @translate_store_errors
    def find_by_status(
        self, status: Optional[LicenseStatus], offset: int, limit: int
    ) -> Tuple[List[License], int]:
        """
        Page through licenses, newest first.

        Args:
            status: Status filter, or None for all licenses
            offset: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Tuple of (page of License entities, total matching count)
        """
        queryset = LicenseModel.objects.all()
        if status is not None:
            queryset = queryset.filter(status=status.value)
        total = queryset.count()
        page = queryset.order_by("-created_at")[offset:offset + limit]
        return [self._to_domain(model) for model in page], total

    @sync_to_async
    @translate_store_errors
    def find_active_trials(self, now: datetime) -> List[License]:
        queryset = LicenseModel.objects.filter(
            tier=LicenseTier.TRIAL.value,
            status=LicenseStatus.ACTIVE.value,
            expires_at__gt=now,
        ).order_by("expires_at")
        return [self._to_domain(model) for model in queryset]

    @sync_to_async
    @translate_store_errors
    def count_by_status(self) -> Dict[str, int]:
        """
        Count licenses per status.

        Returns:
            Mapping of status value to count
        """
        counts = {status.value: 0 for status in LicenseStatus}
        rows = LicenseModel.objects.values("status").annotate(total=Count("id")).order_by()
        for row in rows:
            counts[row["status"]] = row["total"]
        return counts
