from royalty_engine.db.models.artist import Artist
from royalty_engine.db.models.payout import Payout, payout_statements
from royalty_engine.db.models.release import Release
from royalty_engine.db.models.royalty_split import RoyaltySplit
from royalty_engine.db.models.royalty_statement import RoyaltyStatement
from royalty_engine.db.models.track import Track
from royalty_engine.db.models.user import User

__all__ = [
    "Artist",
    "Payout",
    "Release",
    "RoyaltySplit",
    "RoyaltyStatement",
    "Track",
    "User",
    "payout_statements",
]
