from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Literal, Optional, Union
from agents.sentinel.config import AGENT_NAME

Quantity = Union[str, int]


def parse_quantity(value: Quantity | None) -> int | None:
    """Parse a JSON-RPC quantity ("0x1a", "26" or 26) into an int."""
    if value is None:
        return None
    if isinstance(value, int):
        return value
    value = value.strip()
    if not value:
        return None
    if value.lower().startswith("0x"):
        return int(value, 16) if len(value) > 2 else 0
    return int(value)


class _RpcModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Transaction(_RpcModel):
    hash: str
    from_address: Optional[str] = Field(default=None, alias="from")
    to_address: Optional[str] = Field(default=None, alias="to")
    value: Quantity = "0x0"
    gas_price: Optional[Quantity] = Field(default=None, alias="gasPrice")
    gas_used: Optional[Quantity] = Field(default=None, alias="gasUsed")
    block_number: Optional[Quantity] = Field(default=None, alias="blockNumber")
    transaction_index: Optional[Quantity] = Field(default=None, alias="transactionIndex")

    @property
    def value_wei(self) -> int:
        return parse_quantity(self.value) or 0

    @property
    def gas_price_wei(self) -> int:
        return parse_quantity(self.gas_price) or 0

    @property
    def gas_used_int(self) -> int | None:
        return parse_quantity(self.gas_used)

    @property
    def block_height(self) -> int | None:
        return parse_quantity(self.block_number)

    @property
    def index(self) -> int | None:
        return parse_quantity(self.transaction_index)


class Receipt(_RpcModel):
    status: Optional[Quantity] = None
    gas_used: Optional[Quantity] = Field(default=None, alias="gasUsed")

    @property
    def succeeded(self) -> bool:
        return parse_quantity(self.status) == 1

    @property
    def gas_used_int(self) -> int | None:
        return parse_quantity(self.gas_used)


class Block(_RpcModel):
    number: Quantity
    hash: Optional[str] = None
    timestamp: Optional[Quantity] = None
    transactions: list[Transaction] = Field(default_factory=list)

    @property
    def height(self) -> int:
        return parse_quantity(self.number) or 0


class ClassificationResult(BaseModel):
    is_significant: bool = False
    reasons: list[str] = Field(default_factory=list)


AdvisoryStatus = Literal["parsed", "unparseable", "disabled", "error"]


class AdvisoryResult(BaseModel):
    is_anomaly: bool = False
    confidence: int = Field(default=0, ge=0, le=100)
    explanation: str = ""
    advisor_enabled: bool = False
    status: AdvisoryStatus = "disabled"


class PollState(BaseModel):
    """Carried between ticks for the lifetime of the process only."""
    last_processed_block: Optional[str] = None
    ticks: int = 0
    blocks_processed: int = 0
    transactions_seen: int = 0
    alerts_sent: int = 0
    errors: int = 0
    last_tick_at: Optional[datetime] = None


class HealthResponse(BaseModel):
    status: str = "ok"
    agent: str = AGENT_NAME
    version: str = "1.0.0"


class StatusResponse(BaseModel):
    last_processed_block: Optional[str]
    last_processed_height: Optional[int]
    ticks: int
    blocks_processed: int
    transactions_seen: int
    alerts_sent: int
    errors: int
    last_tick_at: Optional[datetime]
    busy: bool
    notifications_enabled: bool
    advisor_enabled: bool
    value_threshold_avax: float
    gas_fee_threshold_avax: float
