# FILE: backend/apps/monetization/urls.py
from django.urls import path

from . import views

app_name = 'monetization'

urlpatterns = [
    path('publish-usage/', views.MonetizationPublishUsageView.as_view(), name='publish-usage'),
    path('publish-usage/status/', views.MonetizationPublishUsageStatusView.as_view(), name='publish-usage-status'),
]
