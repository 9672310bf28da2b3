from inventory.services import set_stock
from products.tests.factories import ProductFactory
from warehouses.tests.factories import LocationFactory


def stocked_product(quantity: int = 0, *, location=None, **product_kwargs):
    """Create a product holding `quantity` units at `location` (a new one by default)."""
    product = ProductFactory(**product_kwargs)
    location = location or LocationFactory()
    if quantity:
        set_stock(product, location, quantity)
        product.refresh_from_db()
    return product, location
