"""Error codes returned in libs.result Error values"""


class ErrorCode:
    # Ledger core
    USER_NOT_FOUND = "USER_NOT_FOUND"
    INSUFFICIENT_CREDITS = "INSUFFICIENT_CREDITS"
    ACCOUNT_ALREADY_EXISTS = "ACCOUNT_ALREADY_EXISTS"
    GRANT_CREDITS_FAILED = "GRANT_CREDITS_FAILED"
    CHARGE_CREDITS_FAILED = "CHARGE_CREDITS_FAILED"
    OPEN_ACCOUNT_FAILED = "OPEN_ACCOUNT_FAILED"

    # Subscription events
    UNRESOLVED_ENTITLEMENT = "UNRESOLVED_ENTITLEMENT"
    UNRESOLVED_PRODUCT = "UNRESOLVED_PRODUCT"
    MISSING_APP_USER_ID = "MISSING_APP_USER_ID"
    EVENT_PROCESSING_FAILED = "EVENT_PROCESSING_FAILED"

    # Checkout and recipe usage
    RECORD_CHECKOUT_FAILED = "RECORD_CHECKOUT_FAILED"
    MARK_USAGES_FAILED = "MARK_USAGES_FAILED"
    RECORD_USAGE_FAILED = "RECORD_USAGE_FAILED"

    # Payouts
    BELOW_PAYOUT_THRESHOLD = "BELOW_PAYOUT_THRESHOLD"
    PAYOUT_FAILED = "PAYOUT_FAILED"
    PAYOUT_BATCH_PARTIAL_FAILURE = "PAYOUT_BATCH_PARTIAL_FAILURE"

    RECONCILIATION_FAILED = "RECONCILIATION_FAILED"
