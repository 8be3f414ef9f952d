from django.contrib import admin
from django.urls import include, path

admin.site.site_header = "RSVP dashboard"

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("rsvp.urls")),
]
