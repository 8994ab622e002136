from django.contrib import admin
from django.contrib.auth import views as auth_views
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    # back-office users who fail the role check are sent here
    path("auth/", auth_views.LoginView.as_view(), name="login"),
    path("ledger/", include("ledger_core.urls")),
]
