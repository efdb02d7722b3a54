"""Typed view over the preorder keys of a cart's metadata bag.

Cart metadata is an open JSON object shared with the rest of the store.
This module owns six keys in it. Readers go through ``PreorderMetadata``
and writers go through ``PreorderMetadata.merge_into`` so that every path
interprets the flags the same way and unknown keys survive every write.

Flags are written as JSON booleans. On read, both ``true`` and the string
``"true"`` are accepted because older writers stored strings.
"""

from dataclasses import dataclass, replace
from datetime import UTC, datetime
from enum import Enum

SUBMITTED = "preorder_submitted"
SUBMITTED_AT = "preorder_submitted_at"
DELETED = "preorder_deleted"
DELETED_AT = "preorder_deleted_at"
FOLLOWUP_SENT = "preorder_followup_sent"
FOLLOWUP_SENT_AT = "preorder_followup_sent_at"

# attribute name -> metadata key
_KEYS = {
    "submitted": SUBMITTED,
    "submitted_at": SUBMITTED_AT,
    "deleted": DELETED,
    "deleted_at": DELETED_AT,
    "followup_sent": FOLLOWUP_SENT,
    "followup_sent_at": FOLLOWUP_SENT_AT,
}


class PreorderState(Enum):
    NOT_A_PREORDER = "Not_A_Preorder"
    PENDING_NOTIFICATION = "Pending_Notification"
    NOTIFIED = "Notified"
    DELETED = "Deleted"


def is_truthy_flag(value) -> bool:
    """Return True only for the boolean ``True`` or the string ``"true"``."""
    return value is True or (isinstance(value, str) and value == "true")


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


def _optional_str(value) -> str | None:
    return value if isinstance(value, str) else None


@dataclass(frozen=True)
class PreorderMetadata:
    """The preorder lifecycle flags of one cart."""

    submitted: bool = False
    submitted_at: str | None = None
    deleted: bool = False
    deleted_at: str | None = None
    followup_sent: bool = False
    followup_sent_at: str | None = None

    @classmethod
    def from_metadata(cls, metadata: dict | None) -> "PreorderMetadata":
        metadata = metadata or {}
        return cls(
            submitted=is_truthy_flag(metadata.get(SUBMITTED)),
            submitted_at=_optional_str(metadata.get(SUBMITTED_AT)),
            deleted=is_truthy_flag(metadata.get(DELETED)),
            deleted_at=_optional_str(metadata.get(DELETED_AT)),
            followup_sent=is_truthy_flag(metadata.get(FOLLOWUP_SENT)),
            followup_sent_at=_optional_str(metadata.get(FOLLOWUP_SENT_AT)),
        )

    @property
    def is_active(self) -> bool:
        """A submitted preorder that has not been soft-deleted."""
        return self.submitted and not self.deleted

    @property
    def state(self) -> PreorderState:
        if not self.submitted:
            return PreorderState.NOT_A_PREORDER
        if self.deleted:
            return PreorderState.DELETED
        if self.followup_sent:
            return PreorderState.NOTIFIED
        return PreorderState.PENDING_NOTIFICATION

    def mark_submitted(self, at: str | None = None) -> "PreorderMetadata":
        return replace(self, submitted=True, submitted_at=at or utc_now_iso())

    def mark_deleted(self, at: str | None = None) -> "PreorderMetadata":
        return replace(self, deleted=True, deleted_at=at or utc_now_iso())

    def mark_followup_sent(self, at: str | None = None) -> "PreorderMetadata":
        return replace(self, followup_sent=True, followup_sent_at=at or utc_now_iso())

    def merge_into(self, metadata: dict | None) -> dict:
        """Return a copy of ``metadata`` with these flags written over it.

        Keys this record does not own are kept as they are. Missing
        timestamps never overwrite stored values; a false flag is only
        written when the key already exists.
        """
        merged = dict(metadata or {})
        for attr, key in _KEYS.items():
            value = getattr(self, attr)
            if value is None or (value is False and key not in merged):
                continue
            merged[key] = value
        return merged
