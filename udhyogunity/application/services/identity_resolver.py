"""Business identity resolution.

Callers identify a business by its email (the historical document key), by
the internal businessId field, or occasionally by its display name. Every
lookup swallows storage errors and moves on; "not found" is never fatal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from udhyogunity.application.interfaces.repositories import IBusinessRepository
from udhyogunity.domain.exceptions import TransientStorageException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BusinessIdentifiers:
    """Both forms of a business identifier.

    raw is what the caller passed; business_id and email may equal it.
    """

    raw: str
    business_id: str
    email: str

    @property
    def distinct(self) -> bool:
        return self.email != self.business_id


class BusinessIdentityResolver:
    """Maps caller-supplied identifiers to canonical business keys."""

    def __init__(self, business_repo: IBusinessRepository) -> None:
        self.business_repo = business_repo

    async def _exists(self, key: str) -> bool:
        return await self.business_repo.get(key) is not None

    async def _single_key(self, field: str, value: str) -> str | None:
        keys = await self.business_repo.find_keys_by_field(field, value)
        if len(keys) == 1:
            return keys[0]
        if len(keys) > 1:
            logger.warning(
                "Ambiguous business lookup: %d documents with %s=%r", len(keys), field, value
            )
        return None

    async def resolve_business_key(self, identifier: str | None) -> str | None:
        """Return the Businesses document key for identifier, or None.

        Order: direct read (email first), businessId field, businessName
        field, then a case-insensitive full scan. None means "use the
        identifier verbatim".
        """
        if not identifier:
            return None

        direct_read_done = False
        if "@" in identifier:
            try:
                if await self._exists(identifier):
                    return identifier
                direct_read_done = True
            except TransientStorageException as e:
                logger.warning("Direct business read failed for %r: %s", identifier, e.message)

        if not direct_read_done:
            try:
                if await self._exists(identifier):
                    return identifier
            except TransientStorageException as e:
                logger.warning("Business key read failed for %r: %s", identifier, e.message)

        for field in ("businessId", "businessName"):
            try:
                key = await self._single_key(field, identifier)
            except TransientStorageException as e:
                logger.warning("Business query on %s failed for %r: %s", field, identifier, e.message)
                continue
            if key:
                return key

        try:
            return await self._scan_for_business(identifier)
        except TransientStorageException as e:
            logger.warning("Business scan failed for %r: %s", identifier, e.message)
            return None

    async def _scan_for_business(self, identifier: str) -> str | None:
        """Slow path: O(n) over every business document."""
        needle = identifier.lower()
        for business in await self.business_repo.list_all():
            if business.name and business.name.lower() == needle:
                return business.key
            if business.business_id and business.business_id.lower() == needle:
                return business.key
        return None

    async def resolve_email_for_business_id(self, identifier: str) -> str:
        """Return the email stored on Businesses/{identifier}; identifier itself otherwise."""
        if not identifier or "@" in identifier:
            return identifier
        try:
            business = await self.business_repo.get(identifier)
        except TransientStorageException as e:
            logger.warning("Email lookup failed for business %r: %s", identifier, e.message)
            return identifier
        if business and business.email:
            return business.email
        return identifier

    async def resolve_business_id_for_email(self, email: str) -> str:
        """Return the businessId field of the first business with this email; email otherwise."""
        try:
            matches = await self.business_repo.find_by_email(email)
        except TransientStorageException as e:
            logger.warning("businessId lookup failed for %r: %s", email, e.message)
            return email
        if matches and matches[0].business_id:
            return matches[0].business_id
        return email

    async def resolve_identifiers(self, identifier: str) -> BusinessIdentifiers:
        if "@" in identifier:
            business_id = await self.resolve_business_id_for_email(identifier)
            return BusinessIdentifiers(raw=identifier, business_id=business_id, email=identifier)
        email = await self.resolve_email_for_business_id(identifier)
        return BusinessIdentifiers(raw=identifier, business_id=identifier, email=email)
