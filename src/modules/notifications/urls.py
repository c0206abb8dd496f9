from django.urls import path

from modules.notifications.views import NotificationInboxView

urlpatterns = [
    path("notifications/", NotificationInboxView.as_view(), name="notification-inbox"),
]
