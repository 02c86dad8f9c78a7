"""Demo request and migration ledger models.

Demo requests are leads captured by the marketing site and worked by
admins. Their status and potential values were renamed once; the legacy
values are still accepted on read so that stored records can be parsed
before and after the remap migration runs.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class DemoRequestStatus(str, Enum):
    """Enumeration of demo request status values."""

    PENDING = "PENDING"
    DEMO_CREATED = "DEMO_CREATED"
    FOLLOW_UP = "FOLLOW_UP"
    NEGATIVE = "NEGATIVE"
    # Legacy values, remapped by migration 0001
    CONTACTED = "CONTACTED"
    CANCELLED = "CANCELLED"


class DemoRequestPotential(str, Enum):
    """Enumeration of demo request sales potential values."""

    HIGH_PROBABILITY = "HIGH_PROBABILITY"
    LONG_TERM = "LONG_TERM"
    # Legacy value, cleared by migration 0001
    NEGATIVE = "NEGATIVE"


class DemoRequest(BaseModel):
    """Demo request record.

    Stored in DynamoDB with id as partition key.
    """

    id: str = Field(..., description="Unique demo request identifier")
    full_name: str = Field(..., description="Contact person")
    restaurant_name: str = Field(..., description="Restaurant the demo is for")
    phone: str = Field(..., description="Contact phone number")
    email: str | None = Field(None, description="Contact email")
    restaurant_type: str | None = Field(None, description="Kind of venue")
    table_count: int | None = Field(None, description="Number of tables", ge=0)
    status: DemoRequestStatus = Field(default=DemoRequestStatus.PENDING)
    potential: DemoRequestPotential | None = Field(None)
    follow_up_month: str | None = Field(None, description="Month to follow up, YYYY-MM")
    created_at: datetime = Field(..., description="Record creation timestamp")

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        item: dict[str, Any] = {
            "id": self.id,
            "full_name": self.full_name,
            "restaurant_name": self.restaurant_name,
            "phone": self.phone,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
        }

        if self.email is not None:
            item["email"] = self.email

        if self.restaurant_type is not None:
            item["restaurant_type"] = self.restaurant_type

        if self.table_count is not None:
            item["table_count"] = self.table_count

        if self.potential is not None:
            item["potential"] = self.potential.value

        if self.follow_up_month is not None:
            item["follow_up_month"] = self.follow_up_month

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "DemoRequest":
        """Create DemoRequest from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            DemoRequest: Parsed model instance
        """
        data: dict[str, Any] = {
            "id": item["id"],
            "full_name": item["full_name"],
            "restaurant_name": item["restaurant_name"],
            "phone": item["phone"],
            "status": DemoRequestStatus(item.get("status", DemoRequestStatus.PENDING.value)),
            "created_at": datetime.fromisoformat(item["created_at"]),
        }

        for key in ("email", "restaurant_type", "follow_up_month"):
            if key in item:
                data[key] = item[key]

        if "table_count" in item:
            data["table_count"] = int(item["table_count"])

        if item.get("potential"):
            data["potential"] = DemoRequestPotential(item["potential"])

        return cls(**data)


class AppliedMigration(BaseModel):
    """Ledger entry for a migration that has run to completion."""

    version: str = Field(..., description="Migration version, e.g. '0001'")
    description: str = Field(..., description="What the migration changed")
    applied_at: datetime = Field(..., description="Completion timestamp")
    records_changed: int = Field(default=0, description="Records rewritten", ge=0)

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format."""
        return {
            "version": self.version,
            "description": self.description,
            "applied_at": self.applied_at.isoformat(),
            "records_changed": self.records_changed,
        }

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "AppliedMigration":
        """Create AppliedMigration from DynamoDB item."""
        return cls(
            version=item["version"],
            description=item["description"],
            applied_at=datetime.fromisoformat(item["applied_at"]),
            records_changed=int(item.get("records_changed", 0)),
        )
