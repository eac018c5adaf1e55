LABEL_PRINTED_ACTION = "Shipping Label Generated"
LABEL_REPRINTED_ACTION = "Shipping Label Reprinted"
ORDER_IMPORTED_ACTION = "Order Imported"

_SHIPPABLE_STATUSES = ("PENDING", "PAID")


def fulfillment_state(tracking_number, fulfilled_on_source):
    if not tracking_number:
        return "NO_TRACKING"
    if fulfilled_on_source:
        return "SOURCE_SYNCED"
    return "LABEL_PRINTED"


def status_after_label(status):
    if status in _SHIPPABLE_STATUSES:
        return "SHIPPED"
    return status


def label_action(is_reprint: bool) -> str:
    return LABEL_REPRINTED_ACTION if is_reprint else LABEL_PRINTED_ACTION


def can_fulfill_on_source(tracking_number, fulfilled_on_source) -> bool:
    return fulfillment_state(tracking_number, fulfilled_on_source) == "LABEL_PRINTED"


def fulfillment_sync_action(store_name) -> str:
    return f"Fulfillment Sync: Posted to {store_name or 'Store'}"
