# FILE: tests/factories.py
import factory
from django.contrib.auth import get_user_model

from backend.apps.gateway_policies.models import (
    CommonOperationPolicy,
    GatewayPolicyDeployment,
    GatewayPolicyMapping,
    GatewayPolicyMappingEntry,
    PolicyFlow,
)

User = get_user_model()

TENANT_DOMAIN = "carbon.super"


class UserFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = User

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    first_name = factory.Faker('first_name')
    last_name = factory.Faker('last_name')
    is_active = True
    role = User.Role.USER
    tenant_domain = TENANT_DOMAIN


class PublisherFactory(UserFactory):
    role = User.Role.PUBLISHER


class AdminFactory(UserFactory):
    role = User.Role.ADMIN
    is_staff = True


class CommonOperationPolicyFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = CommonOperationPolicy

    tenant_domain = TENANT_DOMAIN
    name = factory.Sequence(lambda n: f"policy{n}")
    version = 'v1'
    display_name = factory.LazyAttribute(lambda o: o.name.title())


class GatewayPolicyMappingFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = GatewayPolicyMapping

    tenant_domain = TENANT_DOMAIN
    display_name = factory.Sequence(lambda n: f"Mapping {n}")
    description = "Applied to all APIs"


class GatewayPolicyMappingEntryFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = GatewayPolicyMappingEntry

    mapping = factory.SubFactory(GatewayPolicyMappingFactory)
    policy = factory.SubFactory(CommonOperationPolicyFactory)
    direction = PolicyFlow.REQUEST
    order = 1


class GatewayPolicyDeploymentFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = GatewayPolicyDeployment

    mapping = factory.SubFactory(GatewayPolicyMappingFactory)
    tenant_domain = factory.SelfAttribute('mapping.tenant_domain')
    gateway_label = factory.Sequence(lambda n: f"gateway-{n}")
