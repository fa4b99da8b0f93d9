"""Classification labels and the Kafka topics they are published to."""

# ── Labels (assigned by the classifier) ───────────────────────────────────────
VALID = "valid"               # location matches the user's residence
SUSPICIOUS = "suspicious"     # location differs, or residence unknown
HIGH_VALUE = "high-value"     # amount strictly above the bank threshold

LABELS = (VALID, SUSPICIOUS, HIGH_VALUE)

# ── Default topic per label (producer: router) ────────────────────────────────
VALID_TRANSACTIONS = "valid-transactions"             # consumers: account-manager, reporting
SUSPICIOUS_TRANSACTIONS = "suspicious-transactions"   # consumers: reporting, user-notification
HIGH_VALUE_TRANSACTIONS = "high-value-transactions"   # consumers: high-value, reporting, user-notification
