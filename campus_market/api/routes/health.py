import pika
from fastapi import APIRouter
from sqlalchemy import text

from campus_market.config import settings
from campus_market.infrastructure.database.connection import AsyncSessionLocal

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict:  # type: ignore[type-arg]
    """Liveness + dependency health check."""
    db_status = "connected"
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
    except Exception as exc:
        db_status = f"error: {exc}"

    checks = {"database": db_status}

    # RabbitMQ only matters when events are actually published there
    if settings.event_publisher == "rabbitmq":
        try:
            connection = pika.BlockingConnection(pika.URLParameters(settings.rabbitmq_url))
            connection.close()
            checks["rabbitmq"] = "connected"
        except Exception as exc:
            checks["rabbitmq"] = f"error: {exc}"

    overall = "healthy" if all(v == "connected" for v in checks.values()) else "degraded"
    return {"status": overall, **checks}
