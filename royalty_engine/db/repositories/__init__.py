from royalty_engine.db.repositories.catalog_repository import CatalogRepository
from royalty_engine.db.repositories.payout_repository import PayoutRepository
from royalty_engine.db.repositories.split_repository import SplitRepository
from royalty_engine.db.repositories.statement_repository import StatementRepository
from royalty_engine.db.repositories.user_repository import UserRepository

__all__ = [
    "CatalogRepository",
    "PayoutRepository",
    "SplitRepository",
    "StatementRepository",
    "UserRepository",
]
