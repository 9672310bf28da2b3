import factory
from django.contrib.auth import get_user_model
from factory.django import DjangoModelFactory


class UserFactory(DjangoModelFactory):
    class Meta:
        model = get_user_model()

    username = factory.Sequence(lambda n: f"user{n}")
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    name = factory.Faker("name")
    role = "warehouse"
    password = factory.PostGenerationMethodCall("set_password", "pass")


class AdminFactory(UserFactory):
    role = "admin"


class ManagerFactory(UserFactory):
    role = "manager"


class StaffFactory(UserFactory):
    """Warehouse-role user; pass `assigned_warehouse` to scope them."""

    role = "warehouse"
