RAZORPAY_CHECKOUT_SCRIPT = "https://checkout.razorpay.com/v1/checkout.js"

# store_settings keys
RAZORPAY_CREDENTIALS_KEY = "razorpay_credentials"
RAZORPAY_STATUS_KEY = "razorpay"

CURRENCY_SYMBOL = "₹"

DEFAULT_STORE_NAME = "Decon Fashions"
DEFAULT_THEME_COLOR = "#0066FF"
