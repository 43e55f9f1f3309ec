"""
Record models.

A Record is one stored instance of a Format: a handle slug plus a flat
JSON blob keyed by storage keys. A Submission is the encoded outgoing
counterpart handed to the storage layer.
"""

from typing import Any

from pydantic import BaseModel, Field


class Record(BaseModel):
    """One persisted entry for a Format."""

    handle: str = Field(default="", description="Record identity slug")
    data: dict[str, Any] = Field(default_factory=dict, description="Stored values keyed by storage key")

    @classmethod
    def from_cms(cls, entry: dict[str, Any]) -> "Record":
        """Build a Record from a CMS meta-data entry (``handle`` + ``meta_data``)."""
        return cls(
            handle=entry.get("handle") or "",
            data=entry.get("meta_data") or {},
        )


class Submission(BaseModel):
    """Encoded values ready for a create/update request."""

    handle: str = Field(..., description="Handle sent with the payload")
    data: dict[str, Any] = Field(default_factory=dict, description="Encoded values keyed by storage key")
    handle_generated: bool = Field(
        default=False,
        description="Whether the handle was generated because the form left it blank",
    )

    def to_payload(self) -> dict[str, Any]:
        """Export in the CMS request shape."""
        return {
            "handle": self.handle,
            "meta_data": self.data,
        }
