"""
Content endpoints: pages, site info, banners, contact messages and catalogue filters
"""
from typing import Optional
from fastapi import APIRouter, Depends

from app.models.content import (
    BannerCreate,
    BannerOrderUpdate,
    BannerUpdate,
    ContactCreate,
    FilterCreate,
    FilterUpdate,
    InfoWebsiteCreate,
    InfoWebsiteUpdate,
    PageCreate,
    PageUpdate,
)
from app.repositories.base import serialize_doc
from app.services.content import BannerService, ContactService, InfoWebsiteService, PageService
from app.services.filters import FilterService
from ..deps import (
    get_banner_service,
    get_contact_service,
    get_filter_service,
    get_info_website_service,
    get_page_service,
    require_permission,
)

pages_router = APIRouter()
info_router = APIRouter()
filters_router = APIRouter()
banners_router = APIRouter()
contacts_router = APIRouter()


# Pages

@pages_router.get("/")
def list_pages(service: PageService = Depends(get_page_service)):
    return serialize_doc(service.find_all())


@pages_router.post("/", status_code=201)
def create_page(
    body: PageCreate,
    service: PageService = Depends(get_page_service),
    _user=Depends(require_permission("pages", "create"))
):
    return serialize_doc(service.create(body.model_dump()))


@pages_router.get("/id/{page_id}")
def get_page_by_id(page_id: str, service: PageService = Depends(get_page_service)):
    return serialize_doc(service.find_one(page_id))


@pages_router.get("/{slug}")
def get_page(slug: str, service: PageService = Depends(get_page_service)):
    return serialize_doc(service.find_by_slug(slug))


@pages_router.patch("/{slug}")
def update_page(
    slug: str,
    body: PageUpdate,
    service: PageService = Depends(get_page_service),
    _user=Depends(require_permission("pages", "update"))
):
    return serialize_doc(service.update(slug, body.model_dump(exclude_unset=True)))


@pages_router.delete("/{slug}")
def delete_page(
    slug: str,
    service: PageService = Depends(get_page_service),
    _user=Depends(require_permission("pages", "delete"))
):
    return serialize_doc(service.remove(slug))


# Site information

@info_router.get("/")
def list_site_info(
    service: InfoWebsiteService = Depends(get_info_website_service),
    _user=Depends(require_permission("info-website", "read"))
):
    return serialize_doc(service.find_all())


@info_router.get("/active")
def get_active_site_info(service: InfoWebsiteService = Depends(get_info_website_service)):
    """Public contact details shown in the storefront footer"""
    return serialize_doc(service.find_active())


@info_router.post("/", status_code=201)
def create_site_info(
    body: InfoWebsiteCreate,
    service: InfoWebsiteService = Depends(get_info_website_service),
    _user=Depends(require_permission("info-website", "create"))
):
    return serialize_doc(service.create(body.model_dump()))


@info_router.get("/{info_id}")
def get_site_info(
    info_id: str,
    service: InfoWebsiteService = Depends(get_info_website_service),
    _user=Depends(require_permission("info-website", "read"))
):
    return serialize_doc(service.find_one(info_id))


@info_router.patch("/{info_id}")
def update_site_info(
    info_id: str,
    body: InfoWebsiteUpdate,
    service: InfoWebsiteService = Depends(get_info_website_service),
    _user=Depends(require_permission("info-website", "update"))
):
    return serialize_doc(service.update(info_id, body.model_dump(exclude_unset=True)))


@info_router.post("/{info_id}/activate")
def activate_site_info(
    info_id: str,
    service: InfoWebsiteService = Depends(get_info_website_service),
    _user=Depends(require_permission("info-website", "activate"))
):
    return serialize_doc(service.set_active(info_id))


@info_router.delete("/{info_id}")
def delete_site_info(
    info_id: str,
    service: InfoWebsiteService = Depends(get_info_website_service),
    _user=Depends(require_permission("info-website", "delete"))
):
    return serialize_doc(service.remove(info_id))


# Filters

@filters_router.get("/")
def list_filters(service: FilterService = Depends(get_filter_service)):
    return serialize_doc(service.find_all())


@filters_router.get("/category/{category_id}")
def list_category_filters(category_id: str, service: FilterService = Depends(get_filter_service)):
    return serialize_doc(service.find_by_category(category_id))


@filters_router.post("/", status_code=201)
def create_filter(
    body: FilterCreate,
    service: FilterService = Depends(get_filter_service),
    _user=Depends(require_permission("filters", "create"))
):
    return serialize_doc(service.create(body.model_dump()))


@filters_router.get("/{filter_id}")
def get_filter(filter_id: str, service: FilterService = Depends(get_filter_service)):
    return serialize_doc(service.find_one(filter_id))


@filters_router.patch("/{filter_id}")
def update_filter(
    filter_id: str,
    body: FilterUpdate,
    service: FilterService = Depends(get_filter_service),
    _user=Depends(require_permission("filters", "update"))
):
    return serialize_doc(service.update(filter_id, body.model_dump(exclude_unset=True)))


@filters_router.delete("/{filter_id}")
def delete_filter(
    filter_id: str,
    service: FilterService = Depends(get_filter_service),
    _user=Depends(require_permission("filters", "delete"))
):
    return serialize_doc(service.remove(filter_id))


# Banners

@banners_router.get("/")
def list_banners(
    type: Optional[str] = None,
    is_active: Optional[bool] = None,
    service: BannerService = Depends(get_banner_service)
):
    return serialize_doc(service.find_all(type=type, is_active=is_active))


@banners_router.get("/active/{type}")
def list_active_banners(type: str, service: BannerService = Depends(get_banner_service)):
    """Active banners of one placement, in display order"""
    return serialize_doc(service.find_active_by_type(type))


@banners_router.post("/", status_code=201)
def create_banner(
    body: BannerCreate,
    service: BannerService = Depends(get_banner_service),
    _user=Depends(require_permission("banner", "create"))
):
    return serialize_doc(service.create(body.model_dump()))


@banners_router.get("/{banner_id}")
def get_banner(banner_id: str, service: BannerService = Depends(get_banner_service)):
    return serialize_doc(service.find_one(banner_id))


@banners_router.patch("/{banner_id}")
def update_banner(
    banner_id: str,
    body: BannerUpdate,
    service: BannerService = Depends(get_banner_service),
    _user=Depends(require_permission("banner", "update"))
):
    return serialize_doc(service.update(banner_id, body.model_dump(exclude_unset=True)))


@banners_router.patch("/{banner_id}/order")
def update_banner_order(
    banner_id: str,
    body: BannerOrderUpdate,
    service: BannerService = Depends(get_banner_service),
    _user=Depends(require_permission("banner", "update"))
):
    return serialize_doc(service.update_order(banner_id, body.order))


@banners_router.patch("/{banner_id}/toggle-active")
def toggle_banner(
    banner_id: str,
    service: BannerService = Depends(get_banner_service),
    _user=Depends(require_permission("banner", "activate"))
):
    return serialize_doc(service.toggle_active(banner_id))


@banners_router.delete("/{banner_id}")
def delete_banner(
    banner_id: str,
    service: BannerService = Depends(get_banner_service),
    _user=Depends(require_permission("banner", "delete"))
):
    return serialize_doc(service.remove(banner_id))


# Contact messages

@contacts_router.post("/", status_code=201)
def create_contact(body: ContactCreate, service: ContactService = Depends(get_contact_service)):
    """Public contact form"""
    return serialize_doc(service.create(body.model_dump()))


@contacts_router.get("/")
def list_contacts(
    service: ContactService = Depends(get_contact_service),
    _user=Depends(require_permission("contact", "list"))
):
    return serialize_doc(service.find_all())


@contacts_router.get("/{contact_id}")
def get_contact(
    contact_id: str,
    service: ContactService = Depends(get_contact_service),
    _user=Depends(require_permission("contact", "read"))
):
    return serialize_doc(service.find_one(contact_id))


@contacts_router.delete("/{contact_id}")
def delete_contact(
    contact_id: str,
    service: ContactService = Depends(get_contact_service),
    _user=Depends(require_permission("contact", "delete"))
):
    return serialize_doc(service.remove(contact_id))
