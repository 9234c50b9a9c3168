from storefront.client.checkout import (
    CheckoutClient,
    PaymentAttempt,
    PaymentFlowError,
    PaymentState,
)
