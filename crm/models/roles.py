"""Application roles and the static role -> permission table."""

from __future__ import annotations


class AppRoles:
    ADMIN = "Admin"
    MANAGER = "Manager"
    USER = "User"
    GUEST = "Guest"

    ALL_ROLES = (ADMIN, MANAGER, USER, GUEST)


class AppPermissions:
    # Customers
    VIEW_CUSTOMERS = "ViewCustomers"
    CREATE_CUSTOMER = "CreateCustomer"
    EDIT_CUSTOMER = "EditCustomer"
    DELETE_CUSTOMER = "DeleteCustomer"

    # User management
    VIEW_USERS = "ViewUsers"
    CREATE_USER = "CreateUser"
    EDIT_USER = "EditUser"
    DELETE_USER = "DeleteUser"

    # Admin only
    MANAGE_ROLES = "ManageRoles"
    SYSTEM_ADMIN = "SystemAdmin"


ROLE_PERMISSIONS: dict[str, frozenset[str]] = {
    AppRoles.ADMIN: frozenset(
        {
            AppPermissions.VIEW_CUSTOMERS,
            AppPermissions.CREATE_CUSTOMER,
            AppPermissions.EDIT_CUSTOMER,
            AppPermissions.DELETE_CUSTOMER,
            AppPermissions.VIEW_USERS,
            AppPermissions.CREATE_USER,
            AppPermissions.EDIT_USER,
            AppPermissions.DELETE_USER,
            AppPermissions.MANAGE_ROLES,
            AppPermissions.SYSTEM_ADMIN,
        }
    ),
    AppRoles.MANAGER: frozenset(
        {
            AppPermissions.VIEW_CUSTOMERS,
            AppPermissions.CREATE_CUSTOMER,
            AppPermissions.EDIT_CUSTOMER,
            AppPermissions.VIEW_USERS,
        }
    ),
    AppRoles.USER: frozenset(
        {
            AppPermissions.VIEW_CUSTOMERS,
            AppPermissions.CREATE_CUSTOMER,
        }
    ),
    AppRoles.GUEST: frozenset({AppPermissions.VIEW_CUSTOMERS}),
}


def is_valid_role(role: str | None) -> bool:
    return role in AppRoles.ALL_ROLES


def has_permission(role: str | None, permission: str) -> bool:
    return permission in ROLE_PERMISSIONS.get(role or "", frozenset())


def permissions_for(role: str | None) -> frozenset[str]:
    return ROLE_PERMISSIONS.get(role or "", frozenset())
