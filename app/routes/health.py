from fastapi import APIRouter
from sqlalchemy import inspect, text

router = APIRouter(tags=["health"])

@router.get("/health")
async def health_check():
    """Basic health check"""
    return {"status": "healthy", "service": "WholeCell Inventory Sync"}

@router.get("/health/db")
async def database_health():
    """Check database connectivity and tables"""
    try:
        from app.database import async_session

        async with async_session() as session:
            await session.execute(text("SELECT 1"))

            connection = await session.connection()
            tables = await connection.run_sync(
                lambda sync_conn: sorted(inspect(sync_conn).get_table_names())
            )

            return {
                "status": "healthy",
                "database": "connected",
                "tables_count": len(tables),
                "tables": tables
            }
    except Exception as e:
        return {
            "status": "unhealthy",
            "database": "error",
            "error": str(e)
        }
