import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pos_discounts.core.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="POS Discounts API",
    version="1.0.0"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Import routers after app creation to avoid circular imports
from pos_discounts.api import campaigns, discounts

# Routers - all already have /api prefix
app.include_router(campaigns.router)
app.include_router(discounts.router)


@app.get("/")
def root():
    return {"status": "ok", "service": "pos-discounts-api"}


@app.get("/api/health")
def health_check():
    return {
        "status": "healthy",
        "env": settings.ENV
    }
