from fastapi import APIRouter
from app.routes import ledger

api_router = APIRouter()

api_router.include_router(ledger.router)
