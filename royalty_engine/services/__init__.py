from royalty_engine.services.balance_ledger import BalanceLedger, BalanceSnapshot
from royalty_engine.services.catalog_service import CatalogService
from royalty_engine.services.metadata_validator import MetadataValidator, ValidationResult
from royalty_engine.services.payout_workflow import PayoutWorkflow
from royalty_engine.services.split_allocator import SplitAllocator
from royalty_engine.services.statement_service import StatementService

__all__ = [
    "BalanceLedger",
    "BalanceSnapshot",
    "CatalogService",
    "MetadataValidator",
    "PayoutWorkflow",
    "SplitAllocator",
    "StatementService",
    "ValidationResult",
]
