"""Server-rendered pages for the CRM web front-end.

Pages are plain HTML strings. Every value coming from the API or from the
request is escaped with ``html.escape`` before it is interpolated.
"""

from __future__ import annotations

from datetime import datetime
from html import escape
from typing import Iterable, Mapping

from crm.models.roles import AppPermissions, AppRoles
from crm.web.schemas import Customer, SessionUser, User

_STYLE = """
    body {
      margin: 0;
      font-family: ui-sans-serif, system-ui, -apple-system, Segoe UI, Roboto, Arial;
      background: #f5f7fa;
      color: #1f2933;
    }
    header {
      background: #1f2933;
      color: #f5f7fa;
      padding: 12px 24px;
      display: flex;
      align-items: center;
      gap: 18px;
    }
    header a { color: #f5f7fa; text-decoration: none; font-size: 14px; }
    header .brand { font-weight: 700; font-size: 16px; }
    header .spacer { flex: 1; }
    header form { margin: 0; }
    header button { background: none; border: none; color: #f5f7fa; cursor: pointer; font-size: 14px; }
    main { max-width: 960px; margin: 24px auto; padding: 0 16px; }
    h1 { font-size: 22px; margin: 0 0 16px; }
    table { width: 100%; border-collapse: collapse; background: #fff; }
    th, td { text-align: left; padding: 8px 10px; border-bottom: 1px solid #e4e7eb; font-size: 14px; }
    label { display: block; font-size: 12px; color: #52606d; margin: 12px 0 4px; }
    input, select {
      width: 100%;
      max-width: 420px;
      padding: 8px 10px;
      border: 1px solid #cbd2d9;
      border-radius: 6px;
      font-size: 14px;
    }
    input[type=checkbox] { width: auto; }
    .btn {
      display: inline-block;
      padding: 6px 12px;
      border-radius: 6px;
      border: none;
      background: #3e4c59;
      color: #fff;
      text-decoration: none;
      font-size: 13px;
      cursor: pointer;
    }
    .btn-primary { background: #2680c2; }
    .btn-danger { background: #d64545; }
    .actions { display: flex; gap: 6px; }
    .flash { padding: 10px 12px; border-radius: 6px; margin-bottom: 16px; font-size: 14px; }
    .flash-success { background: #e3f9e5; border: 1px solid #57ae5b; }
    .flash-error, .errors { background: #ffe3e3; border: 1px solid #e66a6a; }
    .errors { padding: 10px 12px; border-radius: 6px; margin-bottom: 12px; font-size: 13px; }
    .errors ul { margin: 0; padding-left: 18px; }
    dl { display: grid; grid-template-columns: 160px 1fr; gap: 6px 12px; background: #fff; padding: 16px; }
    dt { color: #52606d; font-size: 13px; }
    dd { margin: 0; font-size: 14px; }
"""


def _e(value) -> str:
    return escape("" if value is None else str(value), quote=True)


def _format_date(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d") if value else ""


def _format_datetime(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else "Never"


def _nav(user: SessionUser | None) -> str:
    links = ["<a class='brand' href='/'>Customer CRM</a>", "<a href='/'>Home</a>"]
    if user is not None:
        links.append("<a href='/Customers'>Customers</a>")
        if user.role == AppRoles.ADMIN:
            links.append("<a href='/Users'>Users</a>")
    links.append("<a href='/Home/Privacy'>Privacy</a>")
    links.append("<span class='spacer'></span>")
    if user is None:
        links.append("<a href='/Account/Login'>Login</a>")
        links.append("<a href='/Account/Register'>Register</a>")
    else:
        links.append(f"<span>Hello, {_e(user.full_name or user.username)} ({_e(user.role)})</span>")
        links.append(
            "<form method='post' action='/Account/Logout'>"
            "<button type='submit'>Logout</button></form>"
        )
    return "\n    ".join(links)


def _flash_html(flash: Mapping[str, str] | None) -> str:
    if not flash:
        return ""
    kind = "error" if flash.get("kind") == "error" else "success"
    return f"<div class='flash flash-{kind}'>{_e(flash.get('message'))}</div>"


def _errors_html(errors: Iterable[str] | None) -> str:
    items = [f"<li>{_e(error)}</li>" for error in errors or []]
    if not items:
        return ""
    return f"<div class='errors'><ul>{''.join(items)}</ul></div>"


def layout(
    title: str,
    body: str,
    user: SessionUser | None = None,
    flash: Mapping[str, str] | None = None,
    script: str = "",
) -> str:
    script_html = f"<script>{script}</script>" if script else ""
    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width,initial-scale=1" />
  <title>{_e(title)} - Customer CRM</title>
  <style>{_STYLE}</style>
</head>
<body>
  <header>
    {_nav(user)}
  </header>
  <main>
    {_flash_html(flash)}
    {body}
  </main>
  {script_html}
</body>
</html>"""


def home_page(user: SessionUser | None, flash: Mapping[str, str] | None = None) -> str:
    if user is not None:
        greeting = f"<h1>Welcome, {_e(user.full_name or user.username)}!</h1>"
        greeting += f"<p>You are signed in with the role <strong>{_e(user.role)}</strong>.</p>"
        greeting += "<p><a class='btn btn-primary' href='/Customers'>View customers</a></p>"
    else:
        greeting = "<h1>Welcome</h1><p>Please <a href='/Account/Login'>log in</a> to manage customers.</p>"
    return layout("Home", greeting, user=user, flash=flash)


def privacy_page(user: SessionUser | None) -> str:
    body = (
        "<h1>Privacy Policy</h1>"
        "<p>Customer data is stored only to provide CRM functionality "
        "and is never shared with third parties.</p>"
    )
    return layout("Privacy", body, user=user)


def login_page(
    error: str | None = None,
    return_url: str = "",
    username: str = "",
    flash: Mapping[str, str] | None = None,
) -> str:
    error_html = f"<div class='errors'>{_e(error)}</div>" if error else ""
    body = f"""<h1>Log in</h1>
    {error_html}
    <form method="post" action="/Account/Login">
      <input type="hidden" name="return_url" value="{_e(return_url)}" />
      <label for="username">Username</label>
      <input id="username" name="username" required value="{_e(username)}" />
      <label for="password">Password</label>
      <input id="password" name="password" type="password" required />
      <label><input type="checkbox" name="remember_me" value="true" /> Remember me</label>
      <p><button class="btn btn-primary" type="submit">Log in</button></p>
    </form>
    <p><a href="/Account/Register">Register as a new user</a></p>"""
    return layout("Log in", body, flash=flash)


def register_page(values: Mapping[str, str] | None = None, errors: Iterable[str] | None = None) -> str:
    values = values or {}
    body = f"""<h1>Register</h1>
    {_errors_html(errors)}
    <form method="post" action="/Account/Register">
      <label for="username">Username</label>
      <input id="username" name="username" required value="{_e(values.get('username'))}" />
      <label for="email">Email</label>
      <input id="email" name="email" type="email" required value="{_e(values.get('email'))}" />
      <label for="first_name">First name</label>
      <input id="first_name" name="first_name" value="{_e(values.get('first_name'))}" />
      <label for="last_name">Last name</label>
      <input id="last_name" name="last_name" value="{_e(values.get('last_name'))}" />
      <label for="password">Password</label>
      <input id="password" name="password" type="password" required />
      <label for="confirm_password">Confirm password</label>
      <input id="confirm_password" name="confirm_password" type="password" required />
      <p><button class="btn btn-primary" type="submit">Register</button></p>
    </form>"""
    return layout("Register", body)


def access_denied_page(user: SessionUser | None, return_url: str = "") -> str:
    back = f"<p><a href='{_e(return_url)}'>Go back</a></p>" if return_url else ""
    body = f"<h1>Access denied</h1><p>You do not have permission to access this resource.</p>{back}"
    return layout("Access denied", body, user=user)


def not_found_page(user: SessionUser | None, message: str = "The requested resource was not found.") -> str:
    return layout("Not found", f"<h1>Not found</h1><p>{_e(message)}</p>", user=user)


_AJAX_SCRIPT = """
async function crmPost(url, body) {
  const response = await fetch(url, {
    method: 'POST',
    headers: {'X-Requested-With': 'XMLHttpRequest'},
    body: body || new FormData(),
  });
  return response.json();
}
document.querySelectorAll('[data-delete-url]').forEach(function (button) {
  button.addEventListener('click', async function (event) {
    event.preventDefault();
    if (!confirm('Delete this customer?')) { return; }
    const result = await crmPost(button.dataset.deleteUrl);
    alert(result.message);
    if (result.success) { button.closest('tr').remove(); }
  });
});
document.querySelectorAll('[data-role-url]').forEach(function (select) {
  select.addEventListener('change', async function () {
    const body = new FormData();
    body.append('role', select.value);
    const result = await crmPost(select.dataset.roleUrl, body);
    alert(result.message);
  });
});
"""


def customers_index_page(
    user: SessionUser,
    customers: list[Customer],
    permissions: frozenset[str],
    flash: Mapping[str, str] | None = None,
    error: str | None = None,
) -> str:
    can_create = AppPermissions.CREATE_CUSTOMER in permissions
    can_edit = AppPermissions.EDIT_CUSTOMER in permissions
    can_delete = AppPermissions.DELETE_CUSTOMER in permissions

    rows = []
    for customer in customers:
        actions = [f"<a class='btn' href='/Customers/Details/{customer.id}'>Details</a>"]
        if can_edit:
            actions.append(f"<a class='btn btn-primary' href='/Customers/Edit/{customer.id}'>Edit</a>")
        if can_delete:
            actions.append(
                f"<form method='post' action='/Customers/Delete/{customer.id}'>"
                f"<button class='btn btn-danger' type='submit' "
                f"data-delete-url='/Customers/Delete/{customer.id}'>Delete</button></form>"
            )
        rows.append(
            "<tr>"
            f"<td>{_e(customer.first_name)}</td>"
            f"<td>{_e(customer.last_name)}</td>"
            f"<td>{_e(customer.contact)}</td>"
            f"<td>{_e(customer.email)}</td>"
            f"<td>{_format_date(customer.date_of_birth)}</td>"
            f"<td><div class='actions'>{''.join(actions)}</div></td>"
            "</tr>"
        )

    if not rows:
        rows.append("<tr><td colspan='6'>No customers found.</td></tr>")

    create_html = "<p><a class='btn btn-primary' href='/Customers/Create'>Create New</a></p>" if can_create else ""
    error_html = f"<div class='errors'>{_e(error)}</div>" if error else ""
    body = f"""<h1>Customers</h1>
    {error_html}
    {create_html}
    <table>
      <thead>
        <tr><th>First name</th><th>Last name</th><th>Contact</th><th>Email</th><th>Date of birth</th><th></th></tr>
      </thead>
      <tbody>
        {''.join(rows)}
      </tbody>
    </table>"""
    return layout("Customers", body, user=user, flash=flash, script=_AJAX_SCRIPT)


def customer_details_page(user: SessionUser, customer: Customer, permissions: frozenset[str]) -> str:
    edit_html = ""
    if AppPermissions.EDIT_CUSTOMER in permissions:
        edit_html = f"<a class='btn btn-primary' href='/Customers/Edit/{customer.id}'>Edit</a> "
    body = f"""<h1>{_e(customer.full_name)}</h1>
    <dl>
      <dt>First name</dt><dd>{_e(customer.first_name)}</dd>
      <dt>Last name</dt><dd>{_e(customer.last_name)}</dd>
      <dt>Contact</dt><dd>{_e(customer.contact)}</dd>
      <dt>Email</dt><dd>{_e(customer.email)}</dd>
      <dt>Date of birth</dt><dd>{_format_date(customer.date_of_birth)}</dd>
    </dl>
    <p>{edit_html}<a class='btn' href='/Customers'>Back to list</a></p>"""
    return layout("Customer details", body, user=user)


def customer_form_values(customer: Customer) -> dict[str, str]:
    return {
        "id": str(customer.id),
        "first_name": customer.first_name,
        "last_name": customer.last_name,
        "contact": customer.contact,
        "email": customer.email,
        "date_of_birth": _format_date(customer.date_of_birth),
    }


def customer_form_page(
    user: SessionUser,
    values: Mapping[str, str] | None = None,
    errors: Iterable[str] | None = None,
    customer_id: int | None = None,
) -> str:
    values = values or {}
    if customer_id is None:
        title, action, id_field = "Create customer", "/Customers/Create", ""
    else:
        title = "Edit customer"
        action = f"/Customers/Edit/{customer_id}"
        id_field = f"<input type='hidden' name='id' value='{_e(values.get('id') or customer_id)}' />"
    body = f"""<h1>{title}</h1>
    {_errors_html(errors)}
    <form method="post" action="{action}">
      {id_field}
      <label for="first_name">First name</label>
      <input id="first_name" name="first_name" required maxlength="100" value="{_e(values.get('first_name'))}" />
      <label for="last_name">Last name</label>
      <input id="last_name" name="last_name" required maxlength="100" value="{_e(values.get('last_name'))}" />
      <label for="contact">Contact</label>
      <input id="contact" name="contact" required maxlength="50" value="{_e(values.get('contact'))}" />
      <label for="email">Email</label>
      <input id="email" name="email" type="email" required value="{_e(values.get('email'))}" />
      <label for="date_of_birth">Date of birth</label>
      <input id="date_of_birth" name="date_of_birth" type="date" required value="{_e(values.get('date_of_birth'))}" />
      <p><button class="btn btn-primary" type="submit">Save</button> <a class="btn" href="/Customers">Back to list</a></p>
    </form>"""
    return layout(title, body, user=user)


def _role_options(selected: str | None) -> str:
    options = []
    for role in AppRoles.ALL_ROLES:
        marker = " selected" if role == selected else ""
        options.append(f"<option value='{_e(role)}'{marker}>{_e(role)}</option>")
    return "".join(options)


def users_index_page(
    user: SessionUser,
    users: list[User],
    flash: Mapping[str, str] | None = None,
) -> str:
    rows = []
    for item in users:
        rows.append(
            "<tr>"
            f"<td>{_e(item.username)}</td>"
            f"<td>{_e(item.full_name)}</td>"
            f"<td>{_e(item.email)}</td>"
            f"<td><select data-role-url='/Users/EditRoleAjax/{item.id}'>{_role_options(item.role)}</select></td>"
            f"<td>{'Yes' if item.is_active else 'No'}</td>"
            f"<td>{_format_datetime(item.last_login_at)}</td>"
            "<td><div class='actions'>"
            f"<a class='btn' href='/Users/Details/{item.id}'>Details</a>"
            f"<a class='btn btn-primary' href='/Users/EditRole/{item.id}'>Edit role</a>"
            "</div></td>"
            "</tr>"
        )
    if not rows:
        rows.append("<tr><td colspan='7'>No users found.</td></tr>")

    body = f"""<h1>Users</h1>
    <p><a class='btn btn-primary' href='/Users/Create'>Create New</a></p>
    <table>
      <thead>
        <tr><th>Username</th><th>Name</th><th>Email</th><th>Role</th><th>Active</th><th>Last login</th><th></th></tr>
      </thead>
      <tbody>
        {''.join(rows)}
      </tbody>
    </table>"""
    return layout("Users", body, user=user, flash=flash, script=_AJAX_SCRIPT)


def user_details_page(user: SessionUser, target: User) -> str:
    body = f"""<h1>{_e(target.username)}</h1>
    <dl>
      <dt>Username</dt><dd>{_e(target.username)}</dd>
      <dt>Email</dt><dd>{_e(target.email)}</dd>
      <dt>Name</dt><dd>{_e(target.full_name)}</dd>
      <dt>Role</dt><dd>{_e(target.role)}</dd>
      <dt>Active</dt><dd>{'Yes' if target.is_active else 'No'}</dd>
      <dt>Created</dt><dd>{_format_datetime(target.created_at)}</dd>
      <dt>Last login</dt><dd>{_format_datetime(target.last_login_at)}</dd>
    </dl>
    <p><a class='btn btn-primary' href='/Users/EditRole/{target.id}'>Edit role</a> <a class='btn' href='/Users'>Back to list</a></p>"""
    return layout("User details", body, user=user)


def user_create_page(
    user: SessionUser,
    values: Mapping[str, str] | None = None,
    errors: Iterable[str] | None = None,
) -> str:
    values = values or {}
    body = f"""<h1>Create user</h1>
    {_errors_html(errors)}
    <form method="post" action="/Users/Create">
      <label for="username">Username</label>
      <input id="username" name="username" required value="{_e(values.get('username'))}" />
      <label for="email">Email</label>
      <input id="email" name="email" type="email" required value="{_e(values.get('email'))}" />
      <label for="first_name">First name</label>
      <input id="first_name" name="first_name" value="{_e(values.get('first_name'))}" />
      <label for="last_name">Last name</label>
      <input id="last_name" name="last_name" value="{_e(values.get('last_name'))}" />
      <label for="password">Password</label>
      <input id="password" name="password" type="password" required />
      <label for="role">Role</label>
      <select id="role" name="role">{_role_options(values.get('role') or AppRoles.USER)}</select>
      <p><button class="btn btn-primary" type="submit">Create</button> <a class="btn" href="/Users">Back to list</a></p>
    </form>"""
    return layout("Create user", body, user=user)


def user_edit_role_page(user: SessionUser, target: User, errors: Iterable[str] | None = None) -> str:
    body = f"""<h1>Edit role for {_e(target.username)}</h1>
    {_errors_html(errors)}
    <form method="post" action="/Users/EditRole/{target.id}">
      <label for="role">Role</label>
      <select id="role" name="role">{_role_options(target.role)}</select>
      <p><button class="btn btn-primary" type="submit">Save</button> <a class="btn" href="/Users">Back to list</a></p>
    </form>"""
    return layout("Edit role", body, user=user)
