from __future__ import annotations

from fastapi import Request, status
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from crm.web.services.session import FLASH_COOKIE_NAME, clear_flash, read_flash, set_flash


def render(request: Request, html: str, status_code: int = status.HTTP_200_OK) -> HTMLResponse:
    """Render a page, consuming any pending flash message."""
    response = HTMLResponse(html, status_code=status_code)
    if FLASH_COOKIE_NAME in request.cookies:
        clear_flash(response, request)
    return response


def pop_flash(request: Request) -> dict[str, str] | None:
    return read_flash(request)


def redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


def redirect_with_flash(request: Request, url: str, message: str, kind: str = "success") -> RedirectResponse:
    response = redirect(url)
    set_flash(response, message, kind=kind, request=request)
    return response


def ajax_result(success: bool, message: str, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse({"success": success, "message": message}, status_code=status_code)
