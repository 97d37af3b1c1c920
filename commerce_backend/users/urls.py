# users/urls.py

"""
/api/auth/register/       organization + owner, returns JWT pair
/api/auth/login/          email or username, returns JWT pair
/api/auth/me/             current user and tenant settings
/api/auth/jwt/create/     SimpleJWT pair (email + password)
/api/auth/jwt/refresh/    SimpleJWT refresh
"""

from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from users.views import LoginView, MeView, RegisterView

app_name = "users"

urlpatterns = [
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    path("me/", MeView.as_view(), name="me"),
    path("jwt/create/", TokenObtainPairView.as_view(), name="jwt-create"),
    path("jwt/refresh/", TokenRefreshView.as_view(), name="jwt-refresh"),
]
