from fastapi import APIRouter

from approval_engine.api.employees import employees_router
from approval_engine.api.grades import grades_router
from approval_engine.api.holidays import holidays_router
from approval_engine.api.requests import requests_router
from approval_engine.api.rules import rules_router
from approval_engine.api.system import system_router

api_router = APIRouter()
api_router.include_router(grades_router)
api_router.include_router(employees_router)
api_router.include_router(rules_router)
api_router.include_router(holidays_router)
api_router.include_router(requests_router)
api_router.include_router(system_router)
