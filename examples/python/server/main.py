import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from x402_osmosis.config import load_settings
from x402_osmosis.fastapi import PAYMENT_RESPONSE_HEADER, install_payment_middleware
from x402_osmosis.logging_config import get_logger, setup_logging
from x402_osmosis.types import OSMOSIS_TESTNET, FacilitatorConfig

setup_logging(logging.DEBUG)

logger = get_logger(__name__)

settings = load_settings(env_file=Path(__file__).parent.parent.parent.parent / ".env")

# Hardcoded server configuration
SERVER_HOST = "0.0.0.0"
SERVER_PORT = 8000

app = FastAPI(title="X402 Osmosis Server", description="Protected resource server")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[PAYMENT_RESPONSE_HEADER],
)

install_payment_middleware(
    app,
    recipient_address=settings.recipient_address,
    routes={
        "/premium": {
            "price": "1000",  # 0.001 OSMO
            "network": OSMOSIS_TESTNET,
            "config": {"description": "Premium market data"},
        },
    },
    # mock facilitator from examples/python/facilitator serves /verify and /settle
    facilitator=FacilitatorConfig(url=settings.facilitator_url),
)


@app.get("/")
async def root():
    """Service info"""
    return {
        "service": "X402 Osmosis Protected Resource Server",
        "status": "running",
        "pay_to": settings.recipient_address,
        "facilitator": settings.facilitator_url,
    }


@app.get("/premium")
async def premium():
    return {"data": "premium content", "price": {"amount": "1000", "denom": "uosmo"}}


if __name__ == "__main__":
    import uvicorn

    if not settings.recipient_address:
        logger.warning("PAY_TO_ADDRESS is not set, /premium will answer 500")

    print("\n" + "=" * 80)
    print("Starting X402 Osmosis Protected Resource Server")
    print("=" * 80)
    print(f"Host: {SERVER_HOST}")
    print(f"Port: {SERVER_PORT}")
    print(f"Facilitator: {settings.facilitator_url}")
    print("Endpoints:")
    print("  /premium - Payment required (1000 uosmo on osmo-test)")
    print("=" * 80 + "\n")

    uvicorn.run(
        app,
        host=SERVER_HOST,
        port=SERVER_PORT,
        log_level="info",
        access_log=True,
    )
