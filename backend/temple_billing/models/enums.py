"""
Temple Billing - Shared enums
Values are part of the API contract
"""

import enum


class UserRole(str, enum.Enum):
    """User role"""
    ADMIN = "admin"   # catalog, users, audit log
    STAFF = "staff"   # billing counter


class AuditAction(str, enum.Enum):
    """Audit log action"""
    # auth
    USER_LOGIN = "user_login"
    USER_LOGOUT = "user_logout"

    # users
    USER_CREATE = "user_create"
    USER_UPDATE = "user_update"
    USER_DEACTIVATE = "user_deactivate"

    # catalog
    POOJA_CREATE = "pooja_create"
    POOJA_UPDATE = "pooja_update"
    POOJA_DELETE = "pooja_delete"
    POOJA_TOGGLE = "pooja_toggle"

    # billing
    BILLING_CREATE = "billing_create"

    # cash handover
    WITHDRAWAL_CREATE = "withdrawal_create"

    # expenses
    EXPENSE_CREATE = "expense_create"
