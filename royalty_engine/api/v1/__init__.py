from fastapi import APIRouter

from royalty_engine.api.v1 import catalog, metadata, payouts, splits, statements, users

api_router = APIRouter()

api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(catalog.router, tags=["catalog"])
api_router.include_router(metadata.router, prefix="/metadata", tags=["metadata"])
api_router.include_router(splits.router, prefix="/splits", tags=["splits"])
api_router.include_router(statements.router, prefix="/statements", tags=["statements"])
api_router.include_router(payouts.router, prefix="/payouts", tags=["payouts"])
