"""Health check endpoint with database connectivity check."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.api.v1.common import render
from app.core.config import get_settings
from app.core.database import check_db_connected, get_db
from app.schemas.health import HealthData
from app.schemas.response import ApiResponse

router = APIRouter()


@router.get("")
def get_health(request: Request, db: Annotated[Session, Depends(get_db)]) -> JSONResponse:
    """
    Return service health status and database connectivity.
    Used by load balancers and monitoring.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"
    return render(
        request,
        ApiResponse[HealthData].success(
            200,
            HealthData(environment=get_settings().APP_ENV, database=db_status),
        ),
    )
