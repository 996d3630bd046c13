from listquery.api.listing import build_listing_router
from listquery.models.customer import Customer

router = build_listing_router(Customer, default_sort="name")
