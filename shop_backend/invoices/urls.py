# invoices/urls.py

from django.urls import path

from invoices.views import InvoiceDetailView, InvoiceDocumentView, InvoiceLinesView, InvoiceListCreateView

app_name = "invoices"

urlpatterns = [
    path("", InvoiceListCreateView.as_view(), name="list"),
    path("<uuid:invoice_id>/", InvoiceDetailView.as_view(), name="detail"),
    path("<uuid:invoice_id>/lines/", InvoiceLinesView.as_view(), name="lines"),
    path("<uuid:invoice_id>/document/", InvoiceDocumentView.as_view(), name="document"),
]
