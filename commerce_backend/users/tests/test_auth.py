# users/tests/test_auth.py

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from tenants.models import Organization

User = get_user_model()


class AuthFlowTests(TestCase):
    """
    GUARANTEES:
    - Registration creates the organization and its owner together
    - Login accepts email or username and returns JWT tokens
    - The access token authenticates tenant endpoints
    """

    def setUp(self):
        self.client = APIClient()

    def _register(self, **extra):
        payload = {
            "email": "duena@example.com",
            "password": "Str0ng-pass-2024",
            "organization_name": "Tienda Luna",
            "currency": "hnl",
            **extra,
        }
        return self.client.post("/api/auth/register/", payload, format="json")

    def test_register_creates_tenant_and_owner(self):
        res = self._register()

        self.assertEqual(res.status_code, 201)
        self.assertIn("access", res.data["tokens"])
        self.assertEqual(res.data["user"]["role"], "owner")
        self.assertEqual(res.data["user"]["username"], "duena")

        org = Organization.objects.get(name="Tienda Luna")
        self.assertEqual(org.currency, "HNL")
        self.assertEqual(User.objects.get(email="duena@example.com").organization, org)

    def test_duplicate_email_is_rejected(self):
        self._register()
        res = self._register(organization_name="Otra")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(Organization.objects.count(), 1)

    def test_login_with_email_or_username(self):
        self._register()

        for identifier in ("duena@example.com", "duena"):
            res = self.client.post(
                "/api/auth/login/",
                {"identifier": identifier, "password": "Str0ng-pass-2024"},
                format="json",
            )
            self.assertEqual(res.status_code, 200)
            self.assertIn("refresh", res.data["tokens"])

    def test_wrong_password_is_401(self):
        self._register()
        res = self.client.post(
            "/api/auth/login/",
            {"identifier": "duena", "password": "nope"},
            format="json",
        )
        self.assertEqual(res.status_code, 401)

    def test_access_token_reaches_tenant_endpoints(self):
        access = self._register().data["tokens"]["access"]

        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
        me = client.get("/api/auth/me/")
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.data["organization_name"], "Tienda Luna")
        self.assertEqual(client.get("/api/accounts/").status_code, 200)

    def test_me_carries_tenant_settings(self):
        access = self._register().data["tokens"]["access"]
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")

        res = client.get("/api/auth/me/")
        self.assertEqual(res.data["organization"]["currency"], "HNL")

    def test_simplejwt_pair_endpoint(self):
        self._register()
        res = self.client.post(
            "/api/auth/jwt/create/",
            {"email": "duena@example.com", "password": "Str0ng-pass-2024"},
            format="json",
        )
        self.assertEqual(res.status_code, 200)
        self.assertIn("access", res.data)

    def test_deactivated_organization_cannot_log_in(self):
        self._register()
        Organization.objects.filter(name="Tienda Luna").update(is_active=False)

        res = self.client.post(
            "/api/auth/login/",
            {"identifier": "duena@example.com", "password": "Str0ng-pass-2024"},
            format="json",
        )
        self.assertEqual(res.status_code, 401)
