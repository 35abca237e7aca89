"""View state values, reducers and view models."""

from rent_ledger.views.rent import RentView, build_rent_view
from rent_ledger.views.state import (
    RentViewState,
    TenantForm,
    TenantFormState,
    clear_filters,
    filter_by_room,
    filter_by_tenant,
    reset_form,
    select_month,
    set_field,
    show_only,
    to_filters,
    validate_tenant_form,
)

__all__ = [
    "RentView",
    "RentViewState",
    "TenantForm",
    "TenantFormState",
    "build_rent_view",
    "clear_filters",
    "filter_by_room",
    "filter_by_tenant",
    "reset_form",
    "select_month",
    "set_field",
    "show_only",
    "to_filters",
    "validate_tenant_form",
]
