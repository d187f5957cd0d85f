"""
Anomaly Advisor — asks Claude whether a transaction looks anomalous.

The model answers in free text, so the verdict is a best-effort keyword parse.
parse_verdict() returns either ParsedVerdict or Unparseable so an empty answer
is never mistaken for "no anomaly found". assess() never raises.
"""
import asyncio
import re
from dataclasses import dataclass
from shared.config import settings
from shared.claude_client import ask_claude, attempt_timeout
from agents.sentinel.models.schemas import AdvisoryResult, Receipt, Transaction
from agents.sentinel.services.formatter import shorten_address, to_display_units
from agents.sentinel.config import (
    ADVISOR_MAX_TOKENS,
    ADVISOR_TEMPERATURE,
    CURRENCY_SYMBOL,
    GAS_PRICE_PRECISION,
)
import structlog

logger = structlog.get_logger()

SYSTEM_PROMPT = (
    "You are a blockchain security expert specializing in detecting anomalous or suspicious "
    "transactions on the Avalanche C-Chain. You will analyze transaction details and determine "
    "if there are any red flags or unusual patterns. Respond with a clear assessment, a "
    "confidence score from 0 to 100, and an explanation."
)

ANOMALY_PATTERN = re.compile(r"anomalous|suspicious|fraudulent", re.IGNORECASE)
CONFIDENCE_PATTERN = re.compile(r"confidence\D*?(\d+)", re.IGNORECASE)
DEFAULT_CONFIDENCE = 50


@dataclass(frozen=True)
class ParsedVerdict:
    is_anomaly: bool
    confidence: int
    text: str


@dataclass(frozen=True)
class Unparseable:
    text: str


def parse_verdict(text: str | None) -> ParsedVerdict | Unparseable:
    if not text or not text.strip():
        return Unparseable(text or "")
    match = CONFIDENCE_PATTERN.search(text)
    confidence = min(int(match.group(1)), 100) if match else DEFAULT_CONFIDENCE
    return ParsedVerdict(
        is_anomaly=ANOMALY_PATTERN.search(text) is not None,
        confidence=confidence,
        text=text,
    )


def describe_transaction(tx: Transaction, receipt: Receipt | None) -> str:
    gas_used = receipt.gas_used_int if receipt and receipt.gas_used_int is not None else "Unknown"
    status = "Success" if receipt and receipt.succeeded else "Failed"
    block = tx.block_height if tx.block_height is not None else "Unknown"
    index = tx.index if tx.index is not None else "Unknown"
    return (
        f"Transaction Hash: {tx.hash}\n"
        f"From: {shorten_address(tx.from_address)}\n"
        f"To: {shorten_address(tx.to_address)}\n"
        f"Value: {to_display_units(tx.value_wei)} {CURRENCY_SYMBOL}\n"
        f"Gas Used: {gas_used}\n"
        f"Gas Price: {to_display_units(tx.gas_price_wei, GAS_PRICE_PRECISION)} {CURRENCY_SYMBOL}\n"
        f"Status: {status}\n"
        f"Block Number: {block}\n"
        f"Transaction Index: {index}"
    )


def build_user_message(tx: Transaction, receipt: Receipt | None) -> str:
    return (
        "Analyze this Avalanche C-Chain transaction and determine if it shows any signs of being "
        f"anomalous, suspicious, or potentially fraudulent:\n{describe_transaction(tx, receipt)}\n\n"
        "Is this transaction anomalous or suspicious? Provide a confidence score (0-100) and explanation."
    )


class AnomalyAdvisor:
    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
    ):
        self.api_key = api_key if api_key is not None else settings.ANTHROPIC_API_KEY
        self.model = model or settings.ADVISOR_MODEL
        self.timeout = timeout if timeout is not None else settings.ADVISOR_TIMEOUT_SECONDS

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def assess(self, tx: Transaction, receipt: Receipt | None) -> AdvisoryResult:
        if not self.enabled:
            logger.debug("advisor_not_configured", tx_hash=tx.hash)
            return AdvisoryResult(
                is_anomaly=False,
                confidence=0,
                explanation="not available",
                advisor_enabled=False,
                status="disabled",
            )

        try:
            text = await asyncio.wait_for(
                asyncio.to_thread(
                    ask_claude,
                    system_prompt=SYSTEM_PROMPT,
                    user_message=build_user_message(tx, receipt),
                    model=self.model,
                    max_tokens=ADVISOR_MAX_TOKENS,
                    temperature=ADVISOR_TEMPERATURE,
                    api_key=self.api_key,
                    timeout=attempt_timeout(self.timeout),
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.error("advisor_timeout", tx_hash=tx.hash, timeout=self.timeout)
            return _error_result(f"timed out after {self.timeout}s")
        except Exception as e:
            logger.error("advisor_failed", tx_hash=tx.hash, error=str(e))
            return _error_result(str(e))

        verdict = parse_verdict(text)
        if isinstance(verdict, Unparseable):
            logger.warning("advisor_unparseable", tx_hash=tx.hash)
            return AdvisoryResult(
                is_anomaly=False,
                confidence=0,
                explanation=verdict.text or "empty response",
                advisor_enabled=True,
                status="unparseable",
            )

        logger.debug("advisor_verdict", tx_hash=tx.hash, anomaly=verdict.is_anomaly, confidence=verdict.confidence)
        return AdvisoryResult(
            is_anomaly=verdict.is_anomaly,
            confidence=verdict.confidence,
            explanation=verdict.text,
            advisor_enabled=True,
            status="parsed",
        )


def _error_result(message: str) -> AdvisoryResult:
    return AdvisoryResult(
        is_anomaly=False,
        confidence=0,
        explanation=f"error: {message}",
        advisor_enabled=False,
        status="error",
    )
