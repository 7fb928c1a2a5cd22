"""Rule tables for metadata validation.

Rule sets are frozen configuration objects handed to ``MetadataValidator``
at construction; tests build their own ``MetadataRules`` instead of patching
``DEFAULT_RULES``.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional


@dataclass(frozen=True)
class FieldRule:
    required: bool = False
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    allowed_values: tuple[str, ...] = ()
    forbidden_chars: tuple[str, ...] = ()
    min_value: Optional[int] = None
    max_value: Optional[int] = None
    min_duration_ms: Optional[int] = None
    max_duration_ms: Optional[int] = None
    max_future_days: Optional[int] = None
    unique: bool = False


@dataclass(frozen=True)
class PlatformRule:
    """Platform overlay for one field.

    ``formats`` and ``min_width`` apply to artwork fields: the value is a file
    name and the width is read from ``<field>_width``.
    """

    required: bool = False
    max_length: Optional[int] = None
    formats: tuple[str, ...] = ()
    min_width: Optional[int] = None


@dataclass(frozen=True)
class MetadataRules:
    # entity_type -> field -> rule
    fields: Mapping[str, Mapping[str, FieldRule]]
    # platform -> entity_type -> field -> rule
    platforms: Mapping[str, Mapping[str, Mapping[str, PlatformRule]]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    bonus_fields: tuple[str, ...] = ()


def freeze(table: dict) -> Mapping:
    """Recursively wrap nested dicts in read-only proxies."""
    return MappingProxyType(
        {
            key: freeze(value) if isinstance(value, dict) else value
            for key, value in table.items()
        }
    )


_FORBIDDEN = ("<", ">", '"', "&")

GENRES = (
    "Rock",
    "Pop",
    "Hip-Hop",
    "Electronic",
    "Jazz",
    "Classical",
    "Country",
    "R&B",
    "Folk",
    "Alternative",
    "Metal",
    "Punk",
    "Reggae",
    "Blues",
    "World",
    "Instrumental",
    "Soundtrack",
)

_ARTWORK_FORMATS = ("jpg", "png")

DEFAULT_RULES = MetadataRules(
    fields=freeze(
        {
            "release": {
                "title": FieldRule(
                    required=True, min_length=1, max_length=500, forbidden_chars=_FORBIDDEN
                ),
                "upc": FieldRule(pattern=r"^[0-9]{12}$", unique=True),
                "genre": FieldRule(required=True, allowed_values=GENRES),
                "language": FieldRule(required=True, pattern=r"^[a-z]{2}$"),
                "release_date": FieldRule(required=True, max_future_days=365),
            },
            "track": {
                "title": FieldRule(
                    required=True, min_length=1, max_length=500, forbidden_chars=_FORBIDDEN
                ),
                "isrc": FieldRule(pattern=r"^[A-Z]{2}[A-Z0-9]{3}[0-9]{7}$", unique=True),
                "duration_ms": FieldRule(
                    required=True, min_duration_ms=30_000, max_duration_ms=3_600_000
                ),
                "track_number": FieldRule(required=True, min_value=1, max_value=999),
            },
            "artist": {
                "name": FieldRule(
                    required=True, min_length=1, max_length=255, forbidden_chars=_FORBIDDEN
                ),
                "email": FieldRule(pattern=r"^[^\s@]+@[^\s@]+\.[^\s@]+$"),
            },
        }
    ),
    platforms=freeze(
        {
            "spotify": {
                "release": {
                    "cover_art": PlatformRule(
                        required=True, min_width=640, formats=_ARTWORK_FORMATS
                    ),
                    "title": PlatformRule(max_length=100),
                    "artist": PlatformRule(max_length=100),
                },
                "track": {"title": PlatformRule(max_length=100)},
            },
            "apple_music": {
                "release": {
                    "cover_art": PlatformRule(
                        required=True, min_width=1400, formats=_ARTWORK_FORMATS
                    ),
                    "title": PlatformRule(max_length=255),
                    "upc": PlatformRule(required=True),
                },
                "track": {
                    "title": PlatformRule(max_length=255),
                    "isrc": PlatformRule(required=True),
                },
            },
            "youtube": {
                "release": {
                    "cover_art": PlatformRule(
                        required=True, min_width=1280, formats=_ARTWORK_FORMATS
                    ),
                },
            },
        }
    ),
    bonus_fields=("description", "genre", "label", "copyright_info"),
)
