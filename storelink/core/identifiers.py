import re
import secrets
import string

_BASE36 = string.digits + string.ascii_uppercase
_NON_ALNUM_RE = re.compile(r"[^0-9A-Za-z]+")

SPID_MAX_ATTEMPTS = 20


def random_token(length: int) -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(length))


def new_product_id() -> str:
    return "GLB-" + random_token(6)


def new_variant_id() -> str:
    return "VAR-" + random_token(6)


def new_store_id() -> str:
    return "ST-" + random_token(4)


def new_order_id() -> str:
    return "ORD-" + random_token(6)


def new_tracking_number() -> str:
    return "1Z" + random_token(8) + "0921"


def fallback_sku() -> str:
    return "SKU-" + random_token(5)


def _abbreviate(value, length):
    return _NON_ALNUM_RE.sub("", value or "")[:length].upper()


def variant_sku(base_sku: str, color: str, size: str) -> str:
    """``<base sku>-<COLOR3><SIZE2>``: ``AP-TEE`` in Black, M gives ``AP-TEE-BLAM``."""
    suffix = _abbreviate(color, 3) + _abbreviate(size, 2)
    base = (base_sku or "").strip().upper()
    if not suffix:
        return base
    return f"{base}-{suffix}" if base else suffix


def store_code(store_id: str) -> str:
    for separator in ("_", "-"):
        parts = store_id.split(separator)
        if len(parts) > 1 and parts[1]:
            return parts[1].upper()
    return store_id[:3].upper()


def product_slug(sku: str, product_id: str) -> str:
    source = (sku or "").strip() or product_id
    return source.split("-")[0].upper()


def sku_fragment(sku: str) -> str:
    return (sku or "").strip().split("-")[-1].upper()


def generate_spid(prefix: str, taken=None) -> str:
    """Draw ``<prefix>-<XXX>`` avoiding values in ``taken`` when possible.

    After ``SPID_MAX_ATTEMPTS`` draws the last candidate is returned as is.
    """
    candidate = f"{prefix}-{random_token(3)}"
    attempts = 1
    while taken and candidate in taken and attempts < SPID_MAX_ATTEMPTS:
        candidate = f"{prefix}-{random_token(3)}"
        attempts += 1
    return candidate


def product_spid(store_id: str, sku: str, product_id: str, taken=None) -> str:
    return generate_spid(f"{store_code(store_id)}-{product_slug(sku, product_id)}", taken)


def variant_spid(store_id: str, variant_sku_value: str, taken=None) -> str:
    return generate_spid(f"{store_code(store_id)}-{sku_fragment(variant_sku_value)}", taken)
