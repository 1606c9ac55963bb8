from fastapi import APIRouter

from leave_engine.api.balances import balances_router, employee_router
from leave_engine.api.calendar import calendar_router, leave_dates_router
from leave_engine.api.policies import router as policies_router
from leave_engine.api.requests import requests_router

api_router = APIRouter()
api_router.include_router(requests_router)
api_router.include_router(employee_router)
api_router.include_router(balances_router)
api_router.include_router(leave_dates_router)
api_router.include_router(calendar_router)
api_router.include_router(policies_router)
