from tests.utils.factories import (
    CatalogFactory,
    PayoutFactory,
    StatementFactory,
    UserFactory,
)
from tests.utils.helpers import (
    add_finalized_statement,
    create_user_with_artist,
    get_available,
    post_concurrent,
    seed_balance,
)

__all__ = [
    "CatalogFactory",
    "PayoutFactory",
    "StatementFactory",
    "UserFactory",
    "add_finalized_statement",
    "create_user_with_artist",
    "get_available",
    "post_concurrent",
    "seed_balance",
]
