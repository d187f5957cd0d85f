"""
Sentinel Agent REST API routes.
"""
from fastapi import APIRouter, HTTPException, Request
from agents.sentinel.models.schemas import HealthResponse, StatusResponse, parse_quantity
from agents.sentinel.services.monitor import BlockMonitor

router = APIRouter(prefix="/api/v1/sentinel", tags=["sentinel"])


def _get_monitor(request: Request) -> BlockMonitor:
    monitor = getattr(request.app.state, "monitor", None)
    if monitor is None:
        raise HTTPException(status_code=503, detail="Monitor not running")
    return monitor


@router.get("/health", response_model=HealthResponse)
async def health(request: Request):
    resp = HealthResponse()
    if getattr(request.app.state, "monitor", None) is None:
        resp.status = "starting"
    return resp


@router.get("/status", response_model=StatusResponse)
async def status(request: Request):
    monitor = _get_monitor(request)
    state = monitor.state
    return StatusResponse(
        last_processed_block=state.last_processed_block,
        last_processed_height=parse_quantity(state.last_processed_block),
        ticks=state.ticks,
        blocks_processed=state.blocks_processed,
        transactions_seen=state.transactions_seen,
        alerts_sent=state.alerts_sent,
        errors=state.errors,
        last_tick_at=state.last_tick_at,
        busy=monitor.busy,
        notifications_enabled=monitor.notifier.enabled,
        advisor_enabled=monitor.advisor.enabled,
        value_threshold_avax=monitor.threshold_value,
        gas_fee_threshold_avax=monitor.threshold_fee,
    )
