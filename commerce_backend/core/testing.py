# core/testing.py

"""
Shared test fixtures: one call builds an organization, its owner and the
TenantContext services expect.
"""

from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model

from accounting.services.account_service import create_account
from products.models import Product
from tenants.context import TenantContext
from tenants.models import Organization


def make_tenant(name="Tienda Central", *, email=None, role="owner", tax_rate="0", currency="HNL"):
    org = Organization.objects.create(name=name, currency=currency, tax_rate=Decimal(tax_rate))
    user = get_user_model().objects.create_user(
        email=email or f"{org.slug}@example.com",
        password="pass12345",
        organization=org,
        role=role,
    )
    return org, user, TenantContext(organization=org, user=user)


def make_account(ctx, name="Caja", opening_balance="0", type="CASH"):
    return create_account(ctx, name=name, type=type, opening_balance=opening_balance)


def make_product(ctx, name="Camiseta", price="100.00", **extra):
    return Product.objects.create(
        organization=ctx.organization,
        name=name,
        price=Decimal(price),
        **extra,
    )
