import anthropic
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential
from shared.config import settings

MAX_ATTEMPTS = 2
MAX_RETRY_WAIT = 2.0

_clients: dict[str, anthropic.Anthropic] = {}


def get_client(api_key: str | None = None) -> anthropic.Anthropic | None:
    """Return a cached Anthropic client for the key, or None when unconfigured."""
    key = api_key if api_key is not None else settings.ANTHROPIC_API_KEY
    if not key:
        return None
    if key not in _clients:
        _clients[key] = anthropic.Anthropic(
            api_key=key,
            timeout=settings.ADVISOR_TIMEOUT_SECONDS,
            max_retries=0,
        )
    return _clients[key]


def attempt_timeout(budget: float) -> float:
    """Per-request timeout so every attempt plus the retry waits fit inside budget."""
    return max((budget - MAX_RETRY_WAIT * (MAX_ATTEMPTS - 1)) / MAX_ATTEMPTS, 1.0)


@retry(
    retry=retry_if_exception_type((anthropic.APIConnectionError, anthropic.RateLimitError)),
    stop=stop_after_attempt(MAX_ATTEMPTS),
    wait=wait_exponential(multiplier=1, min=1, max=MAX_RETRY_WAIT),
    reraise=True,
)
def ask_claude(
    system_prompt: str,
    user_message: str,
    model: str | None = None,
    max_tokens: int = 500,
    temperature: float = 0.1,
    api_key: str | None = None,
    timeout: float | None = None,
) -> str:
    """Send a prompt to Claude and return the text response."""
    client = get_client(api_key)
    if not client:
        raise RuntimeError("ANTHROPIC_API_KEY not configured")
    response = client.messages.create(
        model=model or settings.ADVISOR_MODEL,
        max_tokens=max_tokens,
        temperature=temperature,
        system=system_prompt,
        messages=[{"role": "user", "content": user_message}],
        timeout=timeout if timeout is not None else settings.ADVISOR_TIMEOUT_SECONDS,
    )
    return "".join(block.text for block in response.content if getattr(block, "type", "") == "text")
