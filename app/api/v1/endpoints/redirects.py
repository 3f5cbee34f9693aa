"""
Redirect management endpoints
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query

from app.core.errors import NotFoundError
from app.models.redirect import RedirectBulkCreate, RedirectCreate, RedirectUpdate
from app.repositories.base import serialize_doc
from app.services.redirects import RedirectService
from ..deps import get_redirect_service, require_permission

router = APIRouter()


@router.get("/resolve")
def resolve_redirect(path: str = Query(..., min_length=1),
                     service: RedirectService = Depends(get_redirect_service)):
    """Lookup used by the storefront for client-side navigation"""
    redirect = service.find_redirect_by_path(path)
    if not redirect:
        raise NotFoundError("Redirect", f"No redirect for {path}")
    return serialize_doc(redirect)


@router.get("/")
def list_redirects(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=200),
    type: Optional[str] = None,
    is_active: Optional[bool] = None,
    path: Optional[str] = None,
    status_code: Optional[int] = None,
    service: RedirectService = Depends(get_redirect_service),
    _user=Depends(require_permission("redirects", "read"))
):
    return serialize_doc(service.find_all(page=page, limit=limit, type=type, is_active=is_active,
                                          path=path, status_code=status_code))


@router.post("/", status_code=201)
def create_redirect(
    body: RedirectCreate,
    service: RedirectService = Depends(get_redirect_service),
    _user=Depends(require_permission("redirects", "create"))
):
    return serialize_doc(service.create(body.model_dump()))


@router.post("/bulk")
def create_redirects_bulk(
    body: RedirectBulkCreate,
    service: RedirectService = Depends(get_redirect_service),
    _user=Depends(require_permission("redirects", "create"))
):
    return service.create_bulk([r.model_dump() for r in body.redirects])


@router.get("/{redirect_id}")
def get_redirect(
    redirect_id: str,
    service: RedirectService = Depends(get_redirect_service),
    _user=Depends(require_permission("redirects", "read"))
):
    return serialize_doc(service.find_one(redirect_id))


@router.patch("/{redirect_id}")
def update_redirect(
    redirect_id: str,
    body: RedirectUpdate,
    service: RedirectService = Depends(get_redirect_service),
    _user=Depends(require_permission("redirects", "update"))
):
    return serialize_doc(service.update(redirect_id, body.model_dump(exclude_unset=True)))


@router.delete("/{redirect_id}")
def delete_redirect(
    redirect_id: str,
    service: RedirectService = Depends(get_redirect_service),
    _user=Depends(require_permission("redirects", "delete"))
):
    return serialize_doc(service.remove(redirect_id))
