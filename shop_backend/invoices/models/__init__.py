from .invoice import Invoice
from .invoice_item import InvoiceItem

__all__ = ["Invoice", "InvoiceItem"]
