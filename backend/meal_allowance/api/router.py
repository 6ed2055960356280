from fastapi import APIRouter

from meal_allowance.api.calculations import calculations_router
from meal_allowance.api.employees import employees_router
from meal_allowance.api.leave import leave_router
from meal_allowance.api.month_locks import month_locks_router

api_router = APIRouter()
api_router.include_router(employees_router)
api_router.include_router(leave_router)
api_router.include_router(month_locks_router)
api_router.include_router(calculations_router)
