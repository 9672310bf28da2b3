import factory
from factory.django import DjangoModelFactory
from warehouses.models import Location, Warehouse


class WarehouseFactory(DjangoModelFactory):
    class Meta:
        model = Warehouse

    name = factory.Sequence(lambda n: f"Warehouse {n}")
    code = factory.Sequence(lambda n: f"WH{n}")
    address = factory.Faker("address")


class LocationFactory(DjangoModelFactory):
    class Meta:
        model = Location

    warehouse = factory.SubFactory(WarehouseFactory)
    name = factory.Sequence(lambda n: f"Shelf {n}")
    code = factory.Sequence(lambda n: f"S-{n:03d}")
    type = "shelf"
