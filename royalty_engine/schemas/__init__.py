from royalty_engine.schemas.balance import UserBalance
from royalty_engine.schemas.catalog import (
    ArtistCreate,
    ArtistResponse,
    ReleaseCreate,
    ReleaseResponse,
    TrackCreate,
    TrackResponse,
)
from royalty_engine.schemas.common import (
    ErrorDetail,
    ErrorResponse,
    Pagination,
)
from royalty_engine.schemas.metadata import (
    MetadataValidationRequest,
    MetadataValidationResponse,
)
from royalty_engine.schemas.payouts import (
    PayoutCancel,
    PayoutComplete,
    PayoutCreate,
    PayoutFail,
    PayoutListResponse,
    PayoutProcess,
    PayoutResponse,
    PayoutStatisticsResponse,
)
from royalty_engine.schemas.splits import (
    AllocationResponse,
    SplitCreate,
    SplitListResponse,
    SplitResponse,
)
from royalty_engine.schemas.statements import (
    StatementCreate,
    StatementListResponse,
    StatementPayment,
    StatementResponse,
)
from royalty_engine.schemas.users import UserCreate, UserResponse

__all__ = [
    "AllocationResponse",
    "ArtistCreate",
    "ArtistResponse",
    "ErrorDetail",
    "ErrorResponse",
    "MetadataValidationRequest",
    "MetadataValidationResponse",
    "Pagination",
    "PayoutCancel",
    "PayoutComplete",
    "PayoutCreate",
    "PayoutFail",
    "PayoutListResponse",
    "PayoutProcess",
    "PayoutResponse",
    "PayoutStatisticsResponse",
    "ReleaseCreate",
    "ReleaseResponse",
    "SplitCreate",
    "SplitListResponse",
    "SplitResponse",
    "StatementCreate",
    "StatementListResponse",
    "StatementPayment",
    "StatementResponse",
    "TrackCreate",
    "TrackResponse",
    "UserBalance",
    "UserCreate",
    "UserResponse",
]
