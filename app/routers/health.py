"""Health check router."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.db.session import Database, get_database, health_check

router = APIRouter()


@router.get("/health")
async def health(database: Database = Depends(get_database)):
    """Database connectivity and pool statistics; 503 when the database is unreachable."""
    result = await health_check(database)
    status_code = 200 if result["status"] == "healthy" else 503
    return JSONResponse(status_code=status_code, content=result)
