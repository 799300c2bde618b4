from fastapi import APIRouter

from timelogs.api.v1 import auth, orders, time_logs, users

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(time_logs.router, prefix="/time-logs", tags=["time-logs"])
