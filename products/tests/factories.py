import factory
from factory.django import DjangoModelFactory
from products.models import Product


class ProductFactory(DjangoModelFactory):
    class Meta:
        model = Product

    name = factory.Faker("word")
    sku = factory.Sequence(lambda n: f"SKU-{n:04d}")
    category = "Electronics"
    uom = "pcs"
    reorder_level = 10
    reorder_quantity = 20
