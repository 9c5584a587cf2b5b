"""
api/server.py
-------------
FastAPI application entry point.

Run dev server:
    cd backend
    uvicorn api.server:app --reload --port 8000

Endpoints:
    GET    /v1/health
    GET    /v1/settings
    GET    /v1/tours
    GET    /v1/tours/{tour_id}
    POST   /v1/builder/sessions
    GET    /v1/builder/sessions/{session_id}
    POST   /v1/builder/sessions/{session_id}/waypoints
    DELETE /v1/builder/sessions/{session_id}/waypoints/{waypoint_id}
    PUT    /v1/builder/sessions/{session_id}/people
    DELETE /v1/builder/sessions/{session_id}
    POST   /v1/admin/login | /v1/admin/logout
    GET    /v1/admin/settings | PUT /v1/admin/settings
    GET    /v1/admin/tours | POST /v1/admin/tours
    PUT    /v1/admin/tours/{tour_id} | DELETE /v1/admin/tours/{tour_id}
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
from api.routes import admin, builder, health, tours
from db.connection import close_pool

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    yield
    close_pool()


app = FastAPI(
    title="Boat Tours API",
    version="1.0.0",
    description=(
        "Boat-tour booking backend: curated tours, custom tour builder "
        "with geofence and distance pricing, and an admin surface."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router,  prefix="/v1",         tags=["Health"])
app.include_router(tours.router,   prefix="/v1",         tags=["Tours"])
app.include_router(builder.router, prefix="/v1/builder", tags=["Builder"])
app.include_router(admin.router,   prefix="/v1/admin",   tags=["Admin"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.server:app", host="0.0.0.0", port=8000, reload=True)
