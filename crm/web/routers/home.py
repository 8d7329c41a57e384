from fastapi import APIRouter, Request

from crm.web.deps import get_current_user
from crm.web.responses import pop_flash, render
from crm.web.views import home_page, privacy_page

router = APIRouter(tags=["home"])


@router.get("/")
@router.get("/Home/Index")
def index(request: Request):
    return render(request, home_page(get_current_user(request), flash=pop_flash(request)))


@router.get("/Home/Privacy")
def privacy(request: Request):
    return render(request, privacy_page(get_current_user(request)))
