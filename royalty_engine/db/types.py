"""Column types shared by all models.

PostgreSQL is the production database; the test suite also runs on SQLite,
so primary keys, JSON payloads and timestamps use dialect variants.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import JSON, BigInteger, DateTime, Integer
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import TypeDecorator

# SQLite only autoincrements INTEGER PRIMARY KEY columns
BigIntPK = BigInteger().with_variant(Integer(), "sqlite")

JSONType = JSON().with_variant(JSONB(), "postgresql")

BASIS_POINTS_PER_PERCENT = 100
FULL_ALLOCATION_BP = 100 * BASIS_POINTS_PER_PERCENT


class UTCDateTime(TypeDecorator):
    """Timezone-aware timestamp that always comes back as UTC."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(
        self, value: Optional[datetime], dialect: Any
    ) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(
        self, value: Optional[datetime], dialect: Any
    ) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


def percentage_to_basis_points(percentage: Decimal) -> int:
    """Convert a percentage with at most one decimal place to basis points.

    Raises ValueError when the value carries more precision than one decimal.
    """
    scaled = percentage * BASIS_POINTS_PER_PERCENT
    if scaled != scaled.to_integral_value() or int(scaled) % 10 != 0:
        raise ValueError(f"percentage {percentage} has more than one decimal place")
    return int(scaled)


def basis_points_to_percentage(basis_points: int) -> Decimal:
    return (Decimal(basis_points) / BASIS_POINTS_PER_PERCENT).quantize(Decimal("0.1"))
