from django.urls import path

from . import views

app_name = "ledger"

urlpatterns = [
    path("summary/", views.summary_view, name="summary"),
    path("branch/", views.select_branch_view, name="select-branch"),
    path("entries/", views.entries_view, name="entries"),
    path("entries/<str:entry_id>/void/", views.void_entry_view, name="void-entry"),
    path("export/", views.export_view, name="export"),
    path("transfers/", views.transfers_view, name="transfers"),
    path("transfers/<str:transfer_id>/post/", views.post_transfer_view, name="post-transfer"),
    path("invoices/", views.invoices_view, name="invoices"),
    path("invoices/<str:invoice_number>/pay/", views.pay_invoice_view, name="pay-invoice"),
    path("vehicles/costs/", views.vehicle_costs_view, name="vehicle-costs"),
    path("accounts/", views.accounts_view, name="accounts"),
]
