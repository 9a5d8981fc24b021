# invoices/views.py

"""
INVOICE API

- POST   /invoices/                      checkout the caller's cart
- GET    /invoices/?username=<name>      caller's invoices (admins: anyone's)
- PUT    /invoices/<id>/                 replace lines (owner or admin)
- GET    /invoices/<id>/lines/           lines via the cart snapshot
- GET    /invoices/<id>/document/        PDF receipt download
"""

from __future__ import annotations

from io import BytesIO

from django.http import FileResponse
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.views import APIView

from core.api import success_response
from permissions.roles import IsAdminOrClient
from invoices.serializers import InvoiceLineSerializer, InvoiceSerializer, UpdateInvoiceInputSerializer
from invoices.services import checkout
from invoices.services.documents import document_path_for, render_invoice_document


class InvoiceListCreateView(APIView):
    permission_classes = [IsAdminOrClient]
    serializer_class = InvoiceSerializer

    @extend_schema(
        parameters=[OpenApiParameter("username", str, description="Admins only: another user's invoices")],
        responses={200: InvoiceSerializer(many=True)},
    )
    def get(self, request):
        invoices = checkout.get_invoices_for_user(
            actor=request.user,
            username=request.query_params.get("username"),
        )
        return success_response({"invoices": InvoiceSerializer(invoices, many=True).data})

    @extend_schema(request=None, responses={201: InvoiceSerializer})
    def post(self, request):
        result = checkout.create_invoice(user=request.user)

        payload = {
            "invoice": InvoiceSerializer(result.invoice).data,
            "checkout_state": result.state,
        }
        if result.document_error:
            payload["document_error"] = result.document_error

        return success_response(payload, message="Invoice created", http_status=status.HTTP_201_CREATED)


class InvoiceDetailView(APIView):
    permission_classes = [IsAdminOrClient]
    serializer_class = InvoiceSerializer

    @extend_schema(responses={200: InvoiceSerializer})
    def get(self, request, invoice_id):
        invoice = checkout.get_invoice(invoice_id=invoice_id, actor=request.user)
        return success_response({"invoice": InvoiceSerializer(invoice).data})

    @extend_schema(request=UpdateInvoiceInputSerializer, responses={200: InvoiceSerializer})
    def put(self, request, invoice_id):
        serializer = UpdateInvoiceInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        invoice = checkout.update_invoice(
            invoice_id=invoice_id,
            lines=serializer.validated_data["products"],
            actor=request.user,
        )
        return success_response({"invoice": InvoiceSerializer(invoice).data}, message="Invoice updated")


class InvoiceLinesView(APIView):
    permission_classes = [IsAdminOrClient]
    serializer_class = InvoiceLineSerializer

    @extend_schema(responses={200: InvoiceLineSerializer(many=True)})
    def get(self, request, invoice_id):
        lines = checkout.get_lines_for_invoice(invoice_id=invoice_id, actor=request.user)
        return success_response({"lines": InvoiceLineSerializer(lines, many=True).data})


class InvoiceDocumentView(APIView):
    permission_classes = [IsAdminOrClient]
    @extend_schema(responses={(200, "application/pdf"): bytes})
    def get(self, request, invoice_id):
        invoice = checkout.get_invoice(invoice_id=invoice_id, actor=request.user)
        content = render_invoice_document(invoice)

        return FileResponse(
            BytesIO(content),
            as_attachment=True,
            filename=document_path_for(invoice).name,
            content_type="application/pdf",
        )
