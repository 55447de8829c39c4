"""
URL configuration for billing endpoints.
"""

from django.urls import path

from api.v1.billing import views

urlpatterns = [
    path("invoices/create", views.CreateInvoiceView.as_view(), name="create-invoice"),
    path("invoices/pay", views.PayInvoiceView.as_view(), name="pay-invoice"),
]
