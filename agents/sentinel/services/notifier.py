"""
Notifier — formats transaction alerts and status messages for Telegram.

A missing bot token or chat id turns every call into a logged no-op, and a
failed session start disables notifications for the rest of the run. Nothing
here raises into the poll loop.
"""
from datetime import datetime, timezone
from telegram import Bot
from shared.config import settings
from shared.telegram_bot import create_bot, send_alert
from agents.sentinel.models.schemas import Receipt, Transaction
from agents.sentinel.services.formatter import shorten_address, to_display_units
from agents.sentinel.config import CURRENCY_SYMBOL, EXPLORER_TX_URL
import structlog

logger = structlog.get_logger()

STARTUP_MESSAGE = "🟢 Avalanche AI Monitoring Agent started successfully!"
SHUTDOWN_MESSAGE = "🔴 Avalanche AI Monitoring Agent stopped."


def format_alert(
    tx: Transaction,
    receipt: Receipt | None,
    reasons: list[str],
    now: datetime | None = None,
) -> str:
    status = "✅ Success" if receipt and receipt.succeeded else "❌ Failed"
    timestamp = (now or datetime.now(timezone.utc)).isoformat()

    msg = "🚨 *Significant Transaction Detected*\n\n"
    msg += f"*Hash:* `{tx.hash}`\n"
    msg += f"*Status:* {status}\n"
    msg += f"*From:* `{shorten_address(tx.from_address)}`\n"
    msg += f"*To:* `{shorten_address(tx.to_address)}`\n"
    msg += f"*Value:* {to_display_units(tx.value_wei)} {CURRENCY_SYMBOL}\n"
    if receipt is not None and receipt.gas_used_int is not None:
        msg += f"*Gas Used:* {receipt.gas_used_int}\n"

    msg += "\n*Reasons Flagged:*\n"
    for reason in reasons:
        msg += f"- {reason}\n"

    msg += f"\n*Time:* {timestamp}"
    msg += f"\n\n[View on Snowtrace]({EXPLORER_TX_URL}{tx.hash})"
    return msg


def format_status(text: str) -> str:
    return f"📊 *System Status*\n\n{text}"


class Notifier:
    def __init__(
        self,
        token: str | None = None,
        chat_id: str | None = None,
        timeout: float | None = None,
        bot: Bot | None = None,
    ):
        self.token = token if token is not None else settings.TELEGRAM_BOT_TOKEN
        self.chat_id = chat_id if chat_id is not None else settings.TELEGRAM_CHAT_ID
        self.timeout = timeout
        self._bot = bot
        self._ready = False
        self._failed = False

    @property
    def configured(self) -> bool:
        return bool(self.token and self.chat_id)

    @property
    def enabled(self) -> bool:
        return self.configured and not self._failed

    async def _ensure_session(self) -> Bot:
        if self._bot is None:
            self._bot = create_bot(self.token, self.timeout)
        if not self._ready:
            await self._bot.initialize()
            self._ready = True
        return self._bot

    async def initialize(self) -> bool:
        """Open the bot session and announce startup. Never raises."""
        if not self.configured:
            logger.info("telegram_not_configured", action="initialize_skipped")
            return False
        try:
            await self._ensure_session()
        except Exception as e:
            self._failed = True
            logger.error("telegram_init_failed", error=str(e))
            logger.warning("continuing_without_notifications")
            return False
        await self.send_status(STARTUP_MESSAGE)
        logger.info("telegram_bot_initialized", chat_id=self.chat_id)
        return True

    async def _deliver(self, message: str, disable_preview: bool, kind: str) -> bool:
        if not self.enabled:
            logger.info("telegram_not_configured", action=f"{kind}_skipped")
            return False
        try:
            bot = await self._ensure_session()
            await send_alert(bot, self.chat_id, message, disable_preview=disable_preview)
            return True
        except Exception as e:
            logger.error("telegram_send_failed", kind=kind, error=str(e))
            return False

    async def send_alert(self, tx: Transaction, receipt: Receipt | None, reasons: list[str]) -> bool:
        sent = await self._deliver(format_alert(tx, receipt, reasons), disable_preview=True, kind="alert")
        if sent:
            logger.info("telegram_alert_sent", tx_hash=tx.hash)
        return sent

    async def send_status(self, text: str) -> bool:
        sent = await self._deliver(format_status(text), disable_preview=False, kind="status")
        if sent:
            logger.info("telegram_status_sent")
        return sent

    async def close(self):
        """Announce shutdown and release the bot session. Safe to call twice."""
        if not self._ready or self._bot is None:
            return
        await self.send_status(SHUTDOWN_MESSAGE)
        try:
            await self._bot.shutdown()
        except Exception as e:
            logger.error("telegram_shutdown_failed", error=str(e))
        finally:
            self._ready = False
            logger.info("telegram_session_closed")
