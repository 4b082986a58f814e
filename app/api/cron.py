"""Periodic trigger endpoint for SMS dispatch"""

import hmac
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.config import Settings, get_settings
from app.database import get_db
from app.sms.dispatcher import get_sms_dispatcher

router = APIRouter()
logger = structlog.get_logger()


async def verify_cron_secret(
    authorization: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Bearer token must equal the configured cron secret"""
    expected = f"Bearer {settings.cron_secret}"
    if not settings.cron_secret or not authorization or not hmac.compare_digest(
        authorization.encode(), expected.encode()
    ):
        logger.warning("Rejected cron trigger")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


@router.api_route("/sms", methods=["GET", "POST"], dependencies=[Depends(verify_cron_secret)])
async def run_sms_cron(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Dispatch every SMS due around now"""
    dispatcher = get_sms_dispatcher(db, settings)
    summary = await dispatcher.run()

    if not summary.ok:
        return JSONResponse(status_code=500, content={"error": summary.message})

    return summary.model_dump(by_alias=True, exclude={"ok", "error"}, mode="json")
