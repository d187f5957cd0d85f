"""
Avalanche Block Sentinel — FastAPI application (port 8010)

Polls the Avalanche C-Chain for the latest block, flags large transactions and
high gas fees, optionally asks Claude for an anomaly verdict, and sends alerts
to Telegram.

Interfaces: HTTP status API + Telegram alerts
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from shared.config import settings
from shared.utils.logging import setup_logging
from shared.utils.scheduler import add_interval_job, remove_job, start_scheduler, stop_scheduler
from agents.sentinel.routes.api import router
from agents.sentinel.services.advisor import AnomalyAdvisor
from agents.sentinel.services.chain import ChainClient
from agents.sentinel.services.monitor import BlockMonitor
from agents.sentinel.services.notifier import Notifier
from agents.sentinel.config import MONITOR_JOB_ID, TX_POLL_INTERVAL
import structlog

logger = structlog.get_logger()


def build_monitor() -> BlockMonitor:
    return BlockMonitor(
        chain=ChainClient(),
        notifier=Notifier(),
        advisor=AnomalyAdvisor(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    monitor = build_monitor()
    app.state.monitor = monitor
    logger.info(
        "sentinel_agent_starting",
        rpc_url=monitor.chain.rpc_url,
        interval=TX_POLL_INTERVAL,
        notifications=monitor.notifier.configured,
        advisor=monitor.advisor.enabled,
    )

    await monitor.notifier.initialize()
    await monitor.tick()

    start_scheduler()
    add_interval_job(monitor.tick, seconds=TX_POLL_INTERVAL, job_id=MONITOR_JOB_ID)
    logger.info("monitoring_interval_set", seconds=TX_POLL_INTERVAL)

    yield

    remove_job(MONITOR_JOB_ID)
    if monitor.busy:
        logger.info("waiting_for_inflight_tick")
    await monitor.wait_idle()
    stop_scheduler()
    await monitor.notifier.close()
    await monitor.chain.aclose()
    app.state.monitor = None
    logger.info("sentinel_agent_stopped")


app = FastAPI(
    title="Avalanche Block Sentinel",
    description="Monitors Avalanche C-Chain blocks for large transactions, high gas fees and AI-flagged anomalies, with Telegram alerts.",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(router)


def main():
    import uvicorn
    uvicorn.run(
        "agents.sentinel.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
