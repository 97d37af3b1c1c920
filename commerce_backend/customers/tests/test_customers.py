from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from core.testing import make_tenant
from customers.models import Customer


class CustomerApiTests(TestCase):
    """
    GUARANTEES:
    - Customers are tenant-scoped (another tenant's customer is a 404)
    - Aggregates cannot be written through the API
    """

    def setUp(self):
        self.org, self.user, self.ctx = make_tenant()
        self.client = APIClient()
        self.client.force_authenticate(self.user)

    def test_aggregates_are_read_only(self):
        res = self.client.post(
            "/api/customers/",
            {"name": "Ana", "phone": "9999-0000", "total_orders": 50, "total_spent": "999.00"},
            format="json",
        )
        self.assertEqual(res.status_code, 201)

        customer = Customer.objects.get(pk=res.data["id"])
        self.assertEqual(customer.organization_id, self.org.pk)
        self.assertEqual(customer.total_orders, 0)
        self.assertEqual(customer.total_spent, Decimal("0.00"))

    def test_other_tenant_customer_is_not_found(self):
        other_org, _, _ = make_tenant("Otra")
        foreign = Customer.objects.create(organization=other_org, name="Luis")

        res = self.client.get(f"/api/customers/{foreign.pk}/")
        self.assertEqual(res.status_code, 404)

    def test_search_by_phone(self):
        Customer.objects.create(organization=self.org, name="Ana", phone="3300-1111")
        Customer.objects.create(organization=self.org, name="Beto", phone="9800-2222")

        res = self.client.get("/api/customers/", {"q": "3300"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual([row["name"] for row in res.data["results"]], ["Ana"])
