import pytest

from utils.permissions import Capability, Role, ROLE_CAPABILITIES, get_permissions_by_role, has_capability


def test_every_role_has_an_entry():
    assert set(ROLE_CAPABILITIES) == set(Role)


@pytest.mark.parametrize("role, capability", [
    (Role.VENDOR, Capability.GENERATE_INVOICES),
    (Role.VENDOR, Capability.RECORD_PAYMENTS),
    (Role.ACCOUNTANT, Capability.RECONCILE_ACCOUNTS),
    (Role.ACCOUNTANT, Capability.MANAGE_ATTENDANCE),
    (Role.DRIVER, Capability.SUBMIT_EXPENSE),
    (Role.DRIVER, Capability.LOG_DELIVERY),
    (Role.SOCIETY_ADMIN, Capability.MAKE_PAYMENTS),
    (Role.SUPER_ADMIN, Capability.MANAGE_TENANTS),
    (Role.SUPER_ADMIN, Capability.ASSIGN_EXPENSE_CHARGE),
])
def test_granted(role, capability):
    assert capability in get_permissions_by_role(role)
    assert has_capability(role.value, capability)


@pytest.mark.parametrize("role, capability", [
    (Role.DRIVER, Capability.GENERATE_INVOICES),
    (Role.DRIVER, Capability.RECORD_PAYMENTS),
    (Role.SOCIETY_ADMIN, Capability.VIEW_FINANCIALS),
    (Role.ACCOUNTANT, Capability.MANAGE_DRIVERS),
    (Role.VENDOR, Capability.MANAGE_TENANTS),
    (Role.SUPER_ADMIN, Capability.RECORD_PAYMENTS),
])
def test_denied(role, capability):
    assert not has_capability(role, capability)


def test_unknown_roles_get_nothing():
    assert get_permissions_by_role("janitor") == frozenset()
    assert get_permissions_by_role(None) == frozenset()
    assert not has_capability("janitor", *Capability)


def test_any_of_several_capabilities_is_enough():
    assert has_capability(Role.SOCIETY_ADMIN, Capability.VIEW_FINANCIALS, Capability.VIEW_OWN_INVOICES)
