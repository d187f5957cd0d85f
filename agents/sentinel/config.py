from shared.config import settings

AGENT_NAME = "sentinel"

# Monitoring
TX_POLL_INTERVAL = settings.MONITORING_INTERVAL_SECONDS
MONITOR_JOB_ID = "sentinel_monitor"

# Significance thresholds (AVAX, display units)
VALUE_THRESHOLD_AVAX = settings.TRANSACTION_THRESHOLD_AVAX
GAS_FEE_THRESHOLD_AVAX = settings.GAS_FEE_THRESHOLD_AVAX

# Advisor escalation: anomaly must be reported with confidence strictly above this
ANOMALY_CONFIDENCE_THRESHOLD = settings.ANOMALY_CONFIDENCE_THRESHOLD
ADVISOR_MAX_TOKENS = 500
ADVISOR_TEMPERATURE = 0.1

# Display
CURRENCY_SYMBOL = "AVAX"
DISPLAY_PRECISION = 6
GAS_PRICE_PRECISION = 9
EXPLORER_TX_URL = settings.EXPLORER_TX_URL
