from telegram import Bot, LinkPreviewOptions
from telegram.constants import ParseMode
from telegram.request import HTTPXRequest
from shared.config import settings


def create_bot(token: str | None = None, timeout: float | None = None) -> Bot:
    """Build a Telegram Bot with bounded HTTP timeouts. Call initialize() before use."""
    timeout = timeout if timeout is not None else settings.TELEGRAM_TIMEOUT_SECONDS
    request = HTTPXRequest(
        connect_timeout=timeout,
        read_timeout=timeout,
        write_timeout=timeout,
        pool_timeout=timeout,
    )
    return Bot(token=token if token is not None else settings.TELEGRAM_BOT_TOKEN, request=request)


async def send_alert(
    bot: Bot,
    chat_id: int | str,
    message: str,
    parse_mode: str = ParseMode.MARKDOWN,
    disable_preview: bool = False,
):
    """Send a message to a specific Telegram chat."""
    return await bot.send_message(
        chat_id=chat_id,
        text=message,
        parse_mode=parse_mode,
        link_preview_options=LinkPreviewOptions(is_disabled=True) if disable_preview else None,
    )
