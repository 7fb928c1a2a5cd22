import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Protocol, Sequence

from royalty_engine.core.clock import Clock, SystemClock
from royalty_engine.exceptions import ValidationException
from royalty_engine.metrics import metadata_validations_total
from royalty_engine.services.metadata_rules import (
    DEFAULT_RULES,
    FieldRule,
    MetadataRules,
    PlatformRule,
)

logger = logging.getLogger(__name__)

ERROR_PENALTY = 10
WARNING_PENALTY = 5
BONUS_PER_FIELD = 2


class UniquenessChecker(Protocol):
    async def is_unique(
        self, field: str, value: str, exclude_id: Optional[int] = None
    ) -> bool: ...


@dataclass
class ValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    score: int = 100


def _is_blank(value: Any) -> bool:
    return value is None or str(value).strip() == ""


def _as_number(value: Any) -> Optional[Decimal]:
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        return None
    # NaN and Infinity parse but cannot be compared against bounds
    return number if number.is_finite() else None


def _as_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value)).date()
    except ValueError:
        return None


def _format_amount(value: Decimal) -> str:
    return f"{value.normalize():f}"


class MetadataValidator:
    """Rule-based validation and quality scoring of catalog metadata.

    The only inputs besides the entity are the injected rule table, the
    uniqueness checker and the clock, so repeated calls with the same data
    produce the same result.
    """

    def __init__(
        self,
        uniqueness: UniquenessChecker,
        rules: MetadataRules = DEFAULT_RULES,
        clock: Optional[Clock] = None,
    ) -> None:
        self.uniqueness = uniqueness
        self.rules = rules
        self.clock = clock or SystemClock()

    async def validate(
        self,
        entity: Mapping[str, Any],
        entity_type: str,
        platforms: Sequence[str] = (),
    ) -> ValidationResult:
        field_rules = self.rules.fields.get(entity_type)
        if field_rules is None:
            raise ValidationException(
                message=f"Unknown entity type: {entity_type}",
                details={"entity_type": entity_type},
            )

        errors: list[str] = []
        warnings: list[str] = []

        for name, rule in field_rules.items():
            errors.extend(self._check_field(name, entity.get(name), rule))

        for platform in platforms:
            platform_rules = self.rules.platforms.get(platform, {}).get(entity_type)
            if not platform_rules:
                continue
            for name, requirement in platform_rules.items():
                platform_errors, platform_warnings = self._check_platform_field(
                    platform, name, entity, requirement
                )
                errors.extend(platform_errors)
                warnings.extend(platform_warnings)

        exclude_id = entity.get("id")
        for name, rule in field_rules.items():
            value = entity.get(name)
            if rule.unique and not _is_blank(value):
                if not await self.uniqueness.is_unique(name, str(value), exclude_id):
                    errors.append(f"{name} must be unique")

        result = ValidationResult(
            valid=not errors,
            errors=errors,
            warnings=warnings,
            score=self.calculate_score(entity, errors, warnings),
        )

        metadata_validations_total.labels(
            entity_type=entity_type, valid=str(result.valid).lower()
        ).inc()
        logger.info(
            "Metadata validation finished entity_type=%s valid=%s errors=%s warnings=%s score=%s",
            entity_type,
            result.valid,
            len(errors),
            len(warnings),
            result.score,
            extra={
                "entity_type": entity_type,
                "entity_id": exclude_id,
                "valid": result.valid,
                "score": result.score,
            },
        )
        return result

    def _check_field(self, name: str, value: Any, rule: FieldRule) -> list[str]:
        if _is_blank(value):
            return [f"{name} is required"] if rule.required else []

        errors: list[str] = []
        text = str(value)

        if rule.min_length is not None and len(text) < rule.min_length:
            errors.append(f"{name} must be at least {rule.min_length} characters")
        if rule.max_length is not None and len(text) > rule.max_length:
            errors.append(f"{name} must be at most {rule.max_length} characters")

        if rule.pattern and not re.search(rule.pattern, text):
            errors.append(f"{name} has an invalid format")

        if rule.allowed_values and value not in rule.allowed_values:
            errors.append(f"{name} has a value that is not allowed")

        if any(char in text for char in rule.forbidden_chars):
            errors.append(f"{name} contains forbidden characters")

        numeric_bounds = (
            rule.min_value,
            rule.max_value,
            rule.min_duration_ms,
            rule.max_duration_ms,
        )
        if any(bound is not None for bound in numeric_bounds):
            number = _as_number(value)
            if number is None:
                errors.append(f"{name} must be a number")
            else:
                if rule.min_value is not None and number < rule.min_value:
                    errors.append(f"{name} must be at least {rule.min_value}")
                if rule.max_value is not None and number > rule.max_value:
                    errors.append(f"{name} must be at most {rule.max_value}")
                if rule.min_duration_ms is not None and number < rule.min_duration_ms:
                    seconds = _format_amount(Decimal(rule.min_duration_ms) / 1000)
                    errors.append(f"Track must be at least {seconds} seconds long")
                if rule.max_duration_ms is not None and number > rule.max_duration_ms:
                    minutes = _format_amount(Decimal(rule.max_duration_ms) / 60000)
                    errors.append(f"Track must be at most {minutes} minutes long")

        if rule.max_future_days is not None:
            parsed = _as_date(value)
            if parsed is None:
                errors.append(f"{name} has an invalid format")
            else:
                latest = (self.clock.now() + timedelta(days=rule.max_future_days)).date()
                if parsed > latest:
                    errors.append(
                        f"{name} may be at most {rule.max_future_days} days in the future"
                    )

        return errors

    def _check_platform_field(
        self,
        platform: str,
        name: str,
        entity: Mapping[str, Any],
        requirement: PlatformRule,
    ) -> tuple[list[str], list[str]]:
        errors: list[str] = []
        warnings: list[str] = []
        value = entity.get(name)

        if _is_blank(value):
            if requirement.required:
                errors.append(f"{platform}: {name} is required")
            return errors, warnings

        text = str(value)
        if requirement.max_length is not None and len(text) > requirement.max_length:
            warnings.append(
                f"{platform}: {name} may be too long (max {requirement.max_length})"
            )

        if requirement.formats:
            extension = text.rsplit(".", 1)[-1].lower()
            if extension not in requirement.formats:
                errors.append(
                    f"{platform}: {name} format must be one of: {', '.join(requirement.formats)}"
                )

        if requirement.min_width is not None:
            width = entity.get(f"{name}_width")
            if width is not None:
                number = _as_number(width)
                if number is None:
                    errors.append(f"{platform}: {name}_width must be a number")
                elif number < requirement.min_width:
                    warnings.append(
                        f"{platform}: {name} should be at least {requirement.min_width}px wide"
                    )

        return errors, warnings

    def calculate_score(
        self, entity: Mapping[str, Any], errors: Sequence[str], warnings: Sequence[str]
    ) -> int:
        score = 100
        score -= len(errors) * ERROR_PENALTY
        score -= len(warnings) * WARNING_PENALTY
        score += sum(
            BONUS_PER_FIELD
            for name in self.rules.bonus_fields
            if not _is_blank(entity.get(name))
        )
        return max(0, min(100, score))

    @staticmethod
    def recommendations(result: ValidationResult) -> list[str]:
        hints: list[str] = []
        for message in result.errors + result.warnings:
            if "is required" in message:
                hints.append("Fill in all required fields")
            if "invalid format" in message:
                hints.append("Check code formats (UPC, ISRC)")
            if "too long" in message or ("at most" in message and "characters" in message):
                hints.append("Shorten overly long texts")
            if "cover_art" in message and "px wide" in message:
                hints.append("Consider using higher resolution cover art")
        if result.score < 80:
            hints.append("Complete additional information to improve metadata quality")
        return list(dict.fromkeys(hints))
