"""Collection names and historical path aliases (schema-in-code).

Firestore has no DDL. Older client releases wrote the same logical data
under differently-cased or differently-nested collections; readers must
consult every alias. Keep all names here so the probe tables, repositories
and scripts agree on them.
"""

from udhyogunity.domain.enums import ProductShelf, ReviewType

COLLECTION_BUSINESSES = "Businesses"
COLLECTION_BUSINESSES_LEGACY = "businesses"

COLLECTION_PRODUCTS = "Products"
COLLECTION_PRODUCTS_FLAT = "products"
PRODUCT_SHELVES = tuple(shelf.value for shelf in ProductShelf)
SUBCOLLECTION_PRODUCT_ORDERS = "Orders"

COLLECTION_SERVICES = "Services"
COLLECTION_SERVICES_FLAT = "services"
SUBCOLLECTION_SERVICES_ACTIVE = "Active"
SUBCOLLECTION_SERVICES_ACTIVE_LEGACY = "ActiveServices"
SERVICE_SHELVES = (SUBCOLLECTION_SERVICES_ACTIVE, SUBCOLLECTION_SERVICES_ACTIVE_LEGACY)

COLLECTION_BOOKINGS = "bookings"
COLLECTION_ORDERS = "Orders"
COLLECTION_ORDERS_LEGACY = "orders"

COLLECTION_REVIEWS = "Reviews"
COLLECTION_RATINGS = "Ratings"
COLLECTION_USERS = "Users"
SUBCOLLECTION_REVIEWED_ITEMS = "ReviewedItems"
COLLECTION_USER_REVIEWS = "UserReviews"
SUBCOLLECTION_USER_REVIEWS = "Reviews"
COLLECTION_RATING_COUNTERS = "RatingCounters"

_REVIEW_SEGMENTS = {
    ReviewType.BUSINESS: "Businesses",
    ReviewType.PRODUCT: "Products",
    ReviewType.SERVICE: "Services",
}


def review_collection_path(
    review_type: ReviewType, business_id: str, item_id: str | None = None
) -> str:
    """Composite review collection: Reviews/Businesses/{b}, Reviews/Products/{b}_{i}, ...

    Caller validates that item_id is present for product and service reviews.
    """
    segment = _REVIEW_SEGMENTS[review_type]
    if review_type is ReviewType.BUSINESS:
        return f"{COLLECTION_REVIEWS}/{segment}/{business_id}"
    return f"{COLLECTION_REVIEWS}/{segment}/{business_id}_{item_id}"


def product_shelf_path(business_key: str, shelf: str) -> str:
    return f"{COLLECTION_PRODUCTS}/{business_key}/{shelf}"


def service_shelf_path(business_key: str, shelf: str) -> str:
    return f"{COLLECTION_SERVICES}/{business_key}/{shelf}"


def reviewed_items_path(user_id: str) -> str:
    return f"{COLLECTION_USERS}/{user_id}/{SUBCOLLECTION_REVIEWED_ITEMS}"


def user_reviews_path(user_id: str) -> str:
    return f"{COLLECTION_USER_REVIEWS}/{user_id}/{SUBCOLLECTION_USER_REVIEWS}"
