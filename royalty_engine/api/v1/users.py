from fastapi import APIRouter, status

from royalty_engine.api.dependencies import SessionDep
from royalty_engine.core.config import settings
from royalty_engine.db.repositories import UserRepository
from royalty_engine.exceptions import UserNotFoundException
from royalty_engine.schemas.balance import UserBalance
from royalty_engine.schemas.users import UserCreate, UserResponse
from royalty_engine.services.balance_ledger import BalanceLedger
from royalty_engine.services.catalog_service import CatalogService

router = APIRouter()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(user_data: UserCreate, session: SessionDep) -> UserResponse:
    async with session.begin():
        service = CatalogService(session)
        user = await service.create_user(
            user_data.id, user_data.display_name, user_data.email
        )
        return UserResponse.model_validate(user)


@router.get("/{user_id}/balance", response_model=UserBalance)
async def get_user_balance(
    user_id: str, session: SessionDep, currency: str = settings.default_currency
) -> UserBalance:
    if await UserRepository(session).get_by_id(user_id) is None:
        raise UserNotFoundException(user_id)

    ledger = BalanceLedger(session)
    snapshot = await ledger.get_available_balance(user_id, currency)
    return UserBalance(
        user_id=user_id,
        currency=currency,
        total_earned_cents=snapshot.total_earned_cents,
        total_paid_cents=snapshot.total_paid_cents,
        total_pending_cents=snapshot.total_pending_cents,
        available_cents=snapshot.available_cents,
    )
