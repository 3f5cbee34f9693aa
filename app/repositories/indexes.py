from pymongo import ASCENDING, DESCENDING

from app.core.database import db_manager
from app.core.decorators import retry_on_error


@retry_on_error(retries=3, delay=0.5)
def ensure_indexes():
    col = db_manager.get_collection
    # Users
    col("users").create_index([("email", ASCENDING)], unique=True, name="email_unique")
    # Catalog
    col("categories").create_index([("slug", ASCENDING)], unique=True, name="slug_unique")
    col("categories").create_index([("parent_category", ASCENDING), ("level", ASCENDING)], name="parent_level")
    col("products").create_index([("slug", ASCENDING)], unique=True, name="slug_unique")
    col("products").create_index([("category.main", ASCENDING)], name="main_category")
    col("products").create_index([("created_at", DESCENDING)], name="created_desc")
    col("filters").create_index([("categories", ASCENDING)], name="categories")
    # Vouchers
    col("vouchers").create_index([("code", ASCENDING)], unique=True, name="code_unique")
    col("vouchers").create_index(
        [("is_active", ASCENDING), ("start_date", ASCENDING), ("end_date", ASCENDING)],
        name="active_window"
    )
    # Orders & checkout
    col("orders").create_index([("slug", ASCENDING)], unique=True, name="slug_unique")
    col("orders").create_index([("order_items.product", ASCENDING), ("status", ASCENDING)], name="product_status")
    col("checkouts").create_index([("slug", ASCENDING)], unique=True, name="slug_unique")
    col("checkouts").create_index([("order_id", ASCENDING)], name="order_id")
    # Redirects
    col("redirects").create_index([("old_path", ASCENDING)], unique=True, name="old_path_unique")
    # Permissions
    col("permissions").create_index(
        [("resource", ASCENDING), ("action", ASCENDING)], unique=True, name="resource_action"
    )
    col("user_permissions").create_index([("user_id", ASCENDING)], name="user_id")
    col("role_permissions").create_index([("role_id", ASCENDING)], name="role_id")
    col("roles").create_index([("name", ASCENDING)], unique=True, name="name_unique")
    # Reviews
    col("reviews").create_index(
        [("user_id", ASCENDING), ("product_slug", ASCENDING)], unique=True, name="user_product"
    )
    # Content
    col("pages").create_index([("slug", ASCENDING)], unique=True, name="slug_unique")
    col("banners").create_index([("type", ASCENDING), ("is_active", ASCENDING), ("order", ASCENDING)],
                                name="type_active_order")
    col("contacts").create_index([("created_at", DESCENDING)], name="created_desc")
    # Posts
    col("posts").create_index([("slug", ASCENDING)], unique=True, name="slug_unique")
    col("posts").create_index(
        [("is_deleted", ASCENDING), ("is_visible", ASCENDING), ("status", ASCENDING)],
        name="listing"
    )
    col("posts").create_index([("user_id", ASCENDING), ("created_at", DESCENDING)], name="user_created")
    col("post_categories").create_index([("slug", ASCENDING)], unique=True, name="slug_unique")
    col("post_categories").create_index([("parent", ASCENDING), ("is_deleted", ASCENDING)], name="parent_deleted")
