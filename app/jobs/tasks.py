"""Background job tasks"""

import httpx
import structlog

from app.jobs.celery_app import celery_app
from app.config import settings
from app.logging_config import configure_logging

configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()


@celery_app.task(name="trigger_sms_dispatch")
def trigger_sms_dispatch():
    """POST to the cron endpoint so the API process runs the dispatch batch"""
    if not settings.cron_secret:
        logger.error("CRON_SECRET is not set, skipping SMS trigger")
        return {"status_code": None}

    logger.info("Triggering SMS cron", url=settings.cron_target_url)

    try:
        response = httpx.post(
            settings.cron_target_url,
            headers={
                "Authorization": f"Bearer {settings.cron_secret}",
                "Content-Type": "application/json",
            },
            timeout=60.0,
        )
    except httpx.HTTPError as e:
        logger.error("SMS cron trigger failed", error=str(e))
        raise

    logger.info(
        "SMS cron triggered",
        status_code=response.status_code,
        response=response.text[:1000],
    )
    return {"status_code": response.status_code}
