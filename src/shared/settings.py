"""Environment-driven settings shared by the ordering and identity domains."""

import os

# Payments
CURRENCY = os.getenv("CURRENCY", "USD")
PAYMENT_GATEWAY = os.getenv("PAYMENT_GATEWAY", "fake")

# Checkout lease: serializes concurrent checkouts for one user
CHECKOUT_LEASE_SECONDS = int(os.getenv("CHECKOUT_LEASE_SECONDS", "30"))

# Conditional-write retries (lost races) and pre-charge store retries
CONFLICT_RETRY_ATTEMPTS = int(os.getenv("CONFLICT_RETRY_ATTEMPTS", "8"))
CONFLICT_RETRY_MIN_WAIT = float(os.getenv("CONFLICT_RETRY_MIN_WAIT", "0.01"))
CONFLICT_RETRY_MAX_WAIT = float(os.getenv("CONFLICT_RETRY_MAX_WAIT", "0.5"))
STORE_RETRY_ATTEMPTS = int(os.getenv("STORE_RETRY_ATTEMPTS", "3"))
REFUND_RETRY_ATTEMPTS = int(os.getenv("REFUND_RETRY_ATTEMPTS", "3"))

# Password reset
RESET_TOKEN_BYTES = 20
RESET_TOKEN_TTL_SECONDS = int(os.getenv("RESET_TOKEN_TTL_SECONDS", "3600"))
MIN_PASSWORD_LENGTH = int(os.getenv("MIN_PASSWORD_LENGTH", "8"))
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:7777")

# Mail
EMAIL_ADAPTER = os.getenv("EMAIL_ADAPTER", "fake")
MAIL_FROM = os.getenv("MAIL_FROM", "no-reply@sickfits.example")
MAIL_HOST = os.getenv("MAIL_HOST", "localhost")
MAIL_PORT = int(os.getenv("MAIL_PORT", "587"))
MAIL_USER = os.getenv("MAIL_USER")
MAIL_PASS = os.getenv("MAIL_PASS")
