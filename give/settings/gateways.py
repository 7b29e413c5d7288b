"""Built-in payment gateways."""

from __future__ import annotations


def default_gateways() -> dict[str, dict[str, str]]:
    """Return a fresh copy of the built-in gateway map.

    Each entry carries the label shown in the admin and the one shown on the
    donation form.
    """
    return {
        "paypal": {
            "admin_label": "PayPal Standard",
            "checkout_label": "PayPal",
        },
        "manual": {
            "admin_label": "Test Donation",
            "checkout_label": "Test Donation",
        },
        "offline": {
            "admin_label": "Offline Donation",
            "checkout_label": "Offline Donation",
        },
    }


__all__ = ["default_gateways"]
