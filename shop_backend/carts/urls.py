# carts/urls.py

from django.urls import path

from carts.views import CartView, RemoveLineView

app_name = "carts"

urlpatterns = [
    path("", CartView.as_view(), name="cart"),
    path("lines/remove/", RemoveLineView.as_view(), name="remove-line"),
]
