from enum import Enum


class SplitScope(str, Enum):
    RELEASE = "release"
    TRACK = "track"


class StatementStatus(str, Enum):
    DRAFT = "draft"
    GENERATED = "generated"
    FINALIZED = "finalized"
    PAID = "paid"


class PayoutStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class PaymentMethod(str, Enum):
    BANK_TRANSFER = "bank_transfer"
    PAYPAL = "paypal"
    WISE = "wise"
    CRYPTO = "crypto"


class EntityType(str, Enum):
    RELEASE = "release"
    TRACK = "track"
    ARTIST = "artist"
