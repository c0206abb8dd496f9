from django.urls import path

from modules.reports.views import DashboardView

urlpatterns = [
    path("admin/dashboard/", DashboardView.as_view(), name="admin-dashboard"),
]
