"""
Short-TTL key/value store used to pass one-time state across a redirect.

Expired entries read as absent and are removed when touched. ``pop`` is the
single-read-then-delete accessor.
"""

from datetime import timedelta
from typing import Any, Optional

from ..context.operation_context import operation
from ..db.db_base import as_utc, utc_now
from ..db.db_flash_models import FlashEntry
from ..exceptions import ErrorCode, RepositoryError, ValidationError
from ..utils.crud_helpers import (
    create_record,
    delete_record,
    delete_where,
    get_record,
    update_record,
)
from .base_service import SessionManagedService


class FlashService(SessionManagedService):
    """Flash-state store with explicit expiry."""

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """
        Store a value for ttl_seconds, replacing any existing value.

        The replacement is a single update, so a failed write leaves the
        previous value readable.

        Raises:
            ValidationError: If key is empty or ttl is not positive
            HostStorageError: If the store fails
        """
        if not key:
            raise ValidationError("key must be a non-empty string", field="key")
        if ttl_seconds <= 0:
            raise ValidationError(
                "ttl_seconds must be positive",
                field="ttl_seconds",
                error_code=ErrorCode.INVALID_FORMAT,
                value=ttl_seconds,
            )

        now = utc_now()
        data = {"value": value, "created_at": now, "expires_at": now + timedelta(seconds=ttl_seconds)}

        existing = get_record(self.session, FlashEntry, {"key": key})
        if existing is None:
            try:
                create_record(self.session, FlashEntry, {"key": key, **data})
                return
            except RepositoryError as e:
                if e.error_code != ErrorCode.DUPLICATE:
                    raise
            # A concurrent set created the key first; overwrite it
            existing = get_record(self.session, FlashEntry, {"key": key})

        update_record(self.session, existing, data)

    def get(self, key: str) -> Optional[Any]:
        """Return the stored value, or None if absent or expired."""
        entry = get_record(self.session, FlashEntry, {"key": key})
        if entry is None:
            return None
        if as_utc(entry.expires_at) <= utc_now():
            delete_record(self.session, entry)
            return None
        return entry.value

    def delete(self, key: str) -> bool:
        entry = get_record(self.session, FlashEntry, {"key": key})
        if entry is None:
            return False
        delete_record(self.session, entry)
        return True

    def pop(self, key: str) -> Optional[Any]:
        """Read a value once; it is gone afterwards."""
        value = self.get(key)
        if value is not None:
            self.delete(key)
        return value

    @operation()
    def purge(self, prefix: str) -> int:
        """Remove every entry whose key starts with prefix."""
        if not prefix:
            raise ValidationError("prefix must be a non-empty string", field="prefix")
        escaped = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        return delete_where(
            self.session, FlashEntry, FlashEntry.key.like(f"{escaped}%", escape="\\")
        )
