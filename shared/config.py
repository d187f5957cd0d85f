from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Blockchain
    AVALANCHE_RPC_URL: str = "https://api.avax.network/ext/bc/C/rpc"
    RPC_TIMEOUT_SECONDS: float = 10.0
    EXPLORER_TX_URL: str = "https://snowtrace.io/tx/"

    # Monitoring
    MONITORING_INTERVAL_SECONDS: int = 30
    TRANSACTION_THRESHOLD_AVAX: float = 1000.0
    GAS_FEE_THRESHOLD_AVAX: float = 0.1
    ANOMALY_CONFIDENCE_THRESHOLD: int = 60

    # Telegram (alerts disabled unless both are set)
    TELEGRAM_BOT_TOKEN: str = ""
    TELEGRAM_CHAT_ID: str = ""
    TELEGRAM_TIMEOUT_SECONDS: float = 10.0

    # Anomaly advisor (disabled without a key)
    ANTHROPIC_API_KEY: str = ""
    ADVISOR_MODEL: str = "claude-sonnet-4-20250514"
    ADVISOR_TIMEOUT_SECONDS: float = 30.0

    # Application
    LOG_LEVEL: str = "INFO"
    PORT: int = 8010

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
