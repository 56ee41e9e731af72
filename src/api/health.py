"""Health check endpoint."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy import text
from sqlalchemy.orm import Session

from src.db.database import get_db

router = APIRouter()


@router.get("/health")
def health_check(request: Request, db: Session = Depends(get_db)) -> dict[str, str]:
    """애플리케이션, DB, 레시피북 상태 반환."""
    registry = getattr(request.app.state, "recipe_registry", None)
    recipes = str(registry.count()) if registry is not None else "0"
    try:
        db.execute(text("SELECT 1"))
        return {"status": "ok", "database": "connected", "recipes": recipes}
    except Exception:
        return {"status": "error", "database": "disconnected", "recipes": recipes}
