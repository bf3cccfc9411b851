# FILE: backend/apps/gateway_policies/urls.py
from django.urls import path

from . import views

app_name = 'gateway_policies'

urlpatterns = [
    path('gateway-policies/', views.GatewayPolicyListCreateView.as_view(), name='gateway-policy-list'),
    path('gateway-policies/<uuid:mapping_id>/', views.GatewayPolicyDetailView.as_view(), name='gateway-policy-detail'),
    path('gateway-policies/<uuid:mapping_id>/deploy/', views.GatewayPolicyDeployView.as_view(), name='gateway-policy-deploy'),
    path('global-policies/', views.GlobalPolicyView.as_view(), name='global-policies'),
]
