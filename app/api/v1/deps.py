"""
API Dependencies
"""
from typing import Any, Callable, Dict, Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.errors import AuthError, ForbiddenError
from app.services.auth import get_user_by_token
from app.services.categories import CategoryService
from app.services.checkout import CheckoutService
from app.services.content import BannerService, ContactService, InfoWebsiteService, PageService
from app.services.filters import FilterService
from app.services.metamask import MetaMaskService
from app.services.orders import OrderService
from app.services.payos import PayOSService
from app.services.permissions import PermissionService, RoleService
from app.services.posts import PostCategoryService, PostService
from app.services.products import ProductService
from app.services.redirects import RedirectService
from app.services.reviews import ReviewService
from app.services.vietqr import VietQRService
from app.services.vouchers import VoucherService

# Optional security that does not auto-reject when Authorization is missing
security_optional = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_optional)
) -> Dict[str, Any]:
    """
    Get current authenticated user

    Raises:
        AuthError if the token is missing, invalid, or the user is inactive
    """
    if not credentials:
        raise AuthError("Not authenticated")
    user = get_user_by_token(credentials.credentials)
    if not user:
        raise AuthError("Invalid or expired token")
    return user


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_optional)
) -> Optional[Dict[str, Any]]:
    """Get current user if authenticated, otherwise None"""
    if not credentials:
        return None
    return get_user_by_token(credentials.credentials)


def require_permission(resource: str, action: str) -> Callable:
    """Dependency factory: the admin role always passes, others need the grant"""
    def checker(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        if not PermissionService().user_has_access(user, resource, action):
            raise ForbiddenError(
                f"Missing permission {resource}:{action}",
                details={"resource": resource, "action": action}
            )
        return user
    return checker


def get_category_service() -> CategoryService:
    return CategoryService()


def get_product_service() -> ProductService:
    return ProductService()


def get_voucher_service() -> VoucherService:
    return VoucherService()


def get_order_service() -> OrderService:
    return OrderService()


def get_checkout_service() -> CheckoutService:
    return CheckoutService()


def get_vietqr_service() -> VietQRService:
    return VietQRService()


def get_metamask_service() -> MetaMaskService:
    return MetaMaskService()


def get_payos_service() -> PayOSService:
    return PayOSService()


def get_redirect_service() -> RedirectService:
    return RedirectService()


def get_permission_service() -> PermissionService:
    return PermissionService()


def get_role_service() -> RoleService:
    return RoleService()


def get_review_service() -> ReviewService:
    return ReviewService()


def get_filter_service() -> FilterService:
    return FilterService()


def get_page_service() -> PageService:
    return PageService()


def get_info_website_service() -> InfoWebsiteService:
    return InfoWebsiteService()


def get_banner_service() -> BannerService:
    return BannerService()


def get_contact_service() -> ContactService:
    return ContactService()


def get_post_service() -> PostService:
    return PostService()


def get_post_category_service() -> PostCategoryService:
    return PostCategoryService()
