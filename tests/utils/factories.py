from datetime import date
from typing import Optional
from uuid import uuid4


class UserFactory:
    @staticmethod
    def create_user_id(suffix: Optional[str] = None) -> str:
        if suffix:
            return f"usr_{suffix}"
        return f"usr_{uuid4().hex[:8]}"

    @staticmethod
    def create_user_data(user_id: Optional[str] = None, display_name: str = "Test User") -> dict:
        return {
            "id": user_id or UserFactory.create_user_id(),
            "display_name": display_name,
            "email": "artist@example.com",
        }


class CatalogFactory:
    @staticmethod
    def create_artist_data(user_id: str, name: str = "The Testers") -> dict:
        return {"user_id": user_id, "name": name, "email": "band@example.com"}

    @staticmethod
    def create_release_data(
        artist_id: int,
        title: str = "First Light",
        upc: Optional[str] = None,
        release_date: date = date(2026, 4, 1),
        **overrides,
    ) -> dict:
        data = {
            "artist_id": artist_id,
            "title": title,
            "upc": upc,
            "genre": "Rock",
            "language": "en",
            "release_date": release_date.isoformat(),
        }
        data.update(overrides)
        return data

    @staticmethod
    def create_track_data(
        release_id: int,
        title: str = "Opening",
        isrc: Optional[str] = None,
        duration_ms: int = 210_000,
        track_number: int = 1,
    ) -> dict:
        return {
            "release_id": release_id,
            "title": title,
            "isrc": isrc,
            "duration_ms": duration_ms,
            "track_number": track_number,
        }


class StatementFactory:
    @staticmethod
    def create_statement_data(
        artist_id: int,
        net_revenue_cents: int = 50000,
        currency: str = "USD",
        platform: str = "spotify",
        period_start: date = date(2026, 1, 1),
        period_end: date = date(2026, 1, 31),
    ) -> dict:
        return {
            "artist_id": artist_id,
            "platform": platform,
            "period_start": period_start.isoformat(),
            "period_end": period_end.isoformat(),
            "currency": currency,
            "gross_revenue_cents": net_revenue_cents,
            "net_revenue_cents": net_revenue_cents,
            "total_streams": 1000,
        }


class PayoutFactory:
    @staticmethod
    def create_payout_data(
        user_id: str,
        amount_cents: int,
        currency: str = "USD",
        payment_method: str = "paypal",
        statement_ids: Optional[list[int]] = None,
    ) -> dict:
        return {
            "user_id": user_id,
            "amount_cents": amount_cents,
            "currency": currency,
            "payment_method": payment_method,
            "payment_details": {"paypal_email": "artist@example.com"},
            "statement_ids": statement_ids or [],
        }
