"""
Temple Billing - API v1 router
All v1 endpoints are collected here
"""

from fastapi import APIRouter

from temple_billing.api.v1 import (
    auth,
    users,
    poojas,
    billing,
    collections,
    dashboard,
    reports,
    expenses,
    audit,
)

api_router = APIRouter()

# Auth
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Auth"]
)

# Users
api_router.include_router(
    users.router,
    prefix="/users",
    tags=["Users"]
)

# Pooja master
api_router.include_router(
    poojas.router,
    prefix="/poojas",
    tags=["Poojas"]
)

# Billing
api_router.include_router(
    billing.router,
    prefix="/billing",
    tags=["Billing"]
)

# Cash reconciliation
api_router.include_router(
    collections.router,
    prefix="/collections",
    tags=["Collections"]
)

# Dashboard
api_router.include_router(
    dashboard.router,
    prefix="/dashboard",
    tags=["Dashboard"]
)

# Reports
api_router.include_router(
    reports.router,
    prefix="/reports",
    tags=["Reports"]
)

# Expenses
api_router.include_router(
    expenses.router,
    prefix="/expenses",
    tags=["Expenses"]
)

# Audit log
api_router.include_router(
    audit.router,
    prefix="/audit-logs",
    tags=["Audit log"]
)
