"""Role to capability table.

Each role maps to a fixed set of capabilities; endpoints ask for a capability,
never for a list of roles.
"""
import enum
from typing import Dict, FrozenSet, Optional, Union


class Role(str, enum.Enum):
    SUPER_ADMIN = "super_admin"
    VENDOR = "vendor"
    ACCOUNTANT = "accountant"
    DRIVER = "driver"
    SOCIETY_ADMIN = "society_admin"


class Capability(str, enum.Enum):
    # platform
    MANAGE_TENANTS = "manage_tenants"
    VIEW_ALL_VENDORS = "view_all_vendors"
    MANAGE_SUBSCRIPTIONS = "manage_subscriptions"
    ACCESS_SYSTEM_SETTINGS = "access_system_settings"
    VIEW_PLATFORM_ANALYTICS = "view_platform_analytics"
    MANAGE_BILLING = "manage_billing"
    ASSIGN_EXPENSE_CHARGE = "assign_expense_charge"
    ACCESS_SUPPORT = "access_support"
    # vendor back office
    MANAGE_DRIVERS = "manage_drivers"
    MANAGE_VEHICLES = "manage_vehicles"
    MANAGE_SUPPLIERS = "manage_suppliers"
    MANAGE_SOCIETIES = "manage_societies"
    VIEW_ALL_TRANSACTIONS = "view_all_transactions"
    APPROVE_EXPENSES = "approve_expenses"
    MANAGE_INVOICES = "manage_invoices"
    GENERATE_INVOICES = "generate_invoices"
    VIEW_FINANCIALS = "view_financials"
    RECORD_PAYMENTS = "record_payments"
    RECONCILE_ACCOUNTS = "reconcile_accounts"
    MANAGE_ATTENDANCE = "manage_attendance"
    # field
    LOG_COLLECTION = "log_collection"
    LOG_DELIVERY = "log_delivery"
    SUBMIT_EXPENSE = "submit_expense"
    VIEW_OWN_TRIPS = "view_own_trips"
    # society
    VIEW_OWN_INVOICES = "view_own_invoices"
    MAKE_PAYMENTS = "make_payments"


ROLE_CAPABILITIES: Dict[Role, FrozenSet[Capability]] = {
    Role.SUPER_ADMIN: frozenset({
        Capability.MANAGE_TENANTS,
        Capability.VIEW_ALL_VENDORS,
        Capability.MANAGE_SUBSCRIPTIONS,
        Capability.ACCESS_SYSTEM_SETTINGS,
        Capability.VIEW_PLATFORM_ANALYTICS,
        Capability.MANAGE_BILLING,
        Capability.ASSIGN_EXPENSE_CHARGE,
        Capability.ACCESS_SUPPORT,
    }),
    Role.VENDOR: frozenset({
        Capability.ACCESS_SUPPORT,
        Capability.MANAGE_DRIVERS,
        Capability.MANAGE_VEHICLES,
        Capability.MANAGE_SUPPLIERS,
        Capability.MANAGE_SOCIETIES,
        Capability.VIEW_ALL_TRANSACTIONS,
        Capability.APPROVE_EXPENSES,
        Capability.MANAGE_INVOICES,
        Capability.GENERATE_INVOICES,
        Capability.VIEW_FINANCIALS,
        Capability.RECORD_PAYMENTS,
        Capability.MANAGE_ATTENDANCE,
        Capability.LOG_COLLECTION,
        Capability.LOG_DELIVERY,
    }),
    Role.ACCOUNTANT: frozenset({
        Capability.ACCESS_SUPPORT,
        Capability.VIEW_ALL_TRANSACTIONS,
        Capability.APPROVE_EXPENSES,
        Capability.MANAGE_INVOICES,
        Capability.GENERATE_INVOICES,
        Capability.VIEW_FINANCIALS,
        Capability.RECORD_PAYMENTS,
        Capability.RECONCILE_ACCOUNTS,
        Capability.MANAGE_ATTENDANCE,
    }),
    Role.DRIVER: frozenset({
        Capability.ACCESS_SUPPORT,
        Capability.LOG_COLLECTION,
        Capability.LOG_DELIVERY,
        Capability.SUBMIT_EXPENSE,
        Capability.VIEW_OWN_TRIPS,
    }),
    Role.SOCIETY_ADMIN: frozenset({
        Capability.ACCESS_SUPPORT,
        Capability.VIEW_OWN_INVOICES,
        Capability.MAKE_PAYMENTS,
    }),
}


def parse_role(role: Union[str, Role, None]) -> Optional[Role]:
    if isinstance(role, Role):
        return role
    try:
        return Role(role)
    except ValueError:
        return None


def get_permissions_by_role(role: Union[str, Role, None]) -> FrozenSet[Capability]:
    parsed = parse_role(role)
    if parsed is None:
        return frozenset()
    return ROLE_CAPABILITIES[parsed]


def has_capability(role: Union[str, Role, None], *capabilities: Capability) -> bool:
    """True when the role holds at least one of the given capabilities."""
    granted = get_permissions_by_role(role)
    return any(capability in granted for capability in capabilities)
