"""
Block Monitor — polls the latest C-Chain block, classifies its transactions
and alerts on significant ones.

Poll state lives on the monitor instance. A tick that arrives while the
previous one is still running is dropped, so ticks never interleave.
"""
import asyncio
from datetime import datetime, timezone
from typing import Literal
from agents.sentinel.models.schemas import ClassificationResult, PollState, Transaction, parse_quantity
from agents.sentinel.services.advisor import AnomalyAdvisor
from agents.sentinel.services.chain import ChainClient
from agents.sentinel.services.formatter import classify, to_display_units
from agents.sentinel.services.notifier import Notifier
from agents.sentinel.config import (
    ANOMALY_CONFIDENCE_THRESHOLD,
    CURRENCY_SYMBOL,
    GAS_FEE_THRESHOLD_AVAX,
    VALUE_THRESHOLD_AVAX,
)
import structlog

logger = structlog.get_logger()

TickOutcome = Literal["skipped_busy", "already_processed", "empty", "processed", "failed"]


class BlockMonitor:
    def __init__(
        self,
        chain: ChainClient,
        notifier: Notifier,
        advisor: AnomalyAdvisor,
        threshold_value: float = VALUE_THRESHOLD_AVAX,
        threshold_fee: float = GAS_FEE_THRESHOLD_AVAX,
        anomaly_confidence: int = ANOMALY_CONFIDENCE_THRESHOLD,
        state: PollState | None = None,
    ):
        self.chain = chain
        self.notifier = notifier
        self.advisor = advisor
        self.threshold_value = threshold_value
        self.threshold_fee = threshold_fee
        self.anomaly_confidence = anomaly_confidence
        self.state = state if state is not None else PollState()
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def tick(self) -> TickOutcome:
        if self._lock.locked():
            logger.warning("tick_skipped_busy", last_block=self.state.last_processed_block)
            return "skipped_busy"
        async with self._lock:
            return await self._run_tick()

    async def wait_idle(self):
        """Return once no tick is running. Used at shutdown before sessions close."""
        async with self._lock:
            pass

    async def _run_tick(self) -> TickOutcome:
        self.state.ticks += 1
        self.state.last_tick_at = datetime.now(timezone.utc)
        try:
            block_id = await self.chain.latest_block_id()
            height = parse_quantity(block_id)

            if block_id == self.state.last_processed_block:
                logger.info("block_already_processed", block=height)
                return "already_processed"

            logger.info("processing_block", block=height)
            block = await self.chain.block_by_id(block_id)

            if block is None or not block.transactions:
                logger.info("no_transactions_in_block", block=height)
                self._mark_processed(block_id)
                return "empty"

            logger.info("transactions_found", block=block.height, count=len(block.transactions))
            # Sequential on purpose: the public RPC endpoint is rate limited
            for tx in block.transactions:
                try:
                    await self.process_transaction(tx)
                except Exception as e:
                    self.state.errors += 1
                    logger.error("tx_processing_failed", tx_hash=tx.hash, error=str(e))

            self._mark_processed(block_id)
            return "processed"
        except Exception as e:
            self.state.errors += 1
            logger.error("monitor_tick_failed", error=str(e))
            return "failed"

    def _mark_processed(self, block_id: str):
        self.state.last_processed_block = block_id
        self.state.blocks_processed += 1

    async def process_transaction(self, tx: Transaction) -> ClassificationResult | None:
        """Classify one transaction and alert if it is significant. Zero-value txs are skipped."""
        if tx.value_wei == 0:
            return None
        self.state.transactions_seen += 1

        receipt = await self.chain.receipt_by_hash(tx.hash)
        gas_used = receipt.gas_used if receipt is not None else None
        result = classify(tx, self.threshold_value, self.threshold_fee, gas_used=gas_used)
        significant = result.is_significant

        advisory = None
        if significant or self.advisor.enabled:
            advisory = await self.advisor.assess(tx, receipt)
            if advisory.is_anomaly and advisory.confidence > self.anomaly_confidence:
                result.reasons.append(f"AI detected anomaly ({advisory.confidence}% confidence)")
                significant = True
        result.is_significant = significant

        if not significant:
            return result

        if await self.notifier.send_alert(tx, receipt, result.reasons):
            self.state.alerts_sent += 1
        logger.info(
            "significant_transaction",
            tx_hash=tx.hash,
            from_address=tx.from_address,
            to_address=tx.to_address,
            value=f"{to_display_units(tx.value_wei)} {CURRENCY_SYMBOL}",
            reasons=", ".join(result.reasons),
        )
        if advisory is not None and advisory.advisor_enabled:
            logger.info("advisor_explanation", tx_hash=tx.hash, explanation=advisory.explanation)
        return result
