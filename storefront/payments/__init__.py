"""
Payments — bind payment intents to orders, settle them from webhooks.

    from storefront import payments as P

    binder = P.PaymentIntentBinder(db, state_machine)
    await binder.attach(store_id, order_id, "pi_123")
    await binder.mark_paid_by_intent(store_id, "pi_123")
"""

from storefront.payments._binder import (
    IntentBinding,
    PaymentIntentBinder,
)

__all__ = (
    "IntentBinding",
    "PaymentIntentBinder",
)
