from agents.sentinel.models.schemas import Block, Receipt, Transaction

WEI = 10**18
GWEI = 10**9

ADDR_A = "0x1234567890abcdef1234567890abcdef12345678"
ADDR_B = "0xabcdefabcdefabcdefabcdefabcdefabcdef9999"


def make_tx(
    tx_hash: str = "0xaaa",
    value_wei: int = 0,
    gas_price_wei: int = 25 * GWEI,
    gas_used: int | None = None,
    block: int = 16,
    index: int = 0,
) -> Transaction:
    raw = {
        "hash": tx_hash,
        "from": ADDR_A,
        "to": ADDR_B,
        "value": hex(value_wei),
        "gasPrice": hex(gas_price_wei),
        "blockNumber": hex(block),
        "transactionIndex": hex(index),
    }
    if gas_used is not None:
        raw["gasUsed"] = hex(gas_used)
    return Transaction.model_validate(raw)


def make_receipt(gas_used: int = 21000, success: bool = True) -> Receipt:
    return Receipt.model_validate({"status": "0x1" if success else "0x0", "gasUsed": hex(gas_used)})


def make_block(block_id: str, txs: list[Transaction]) -> Block:
    return Block(number=block_id, hash="0xblock", transactions=txs)
