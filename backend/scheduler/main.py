# scheduler/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scheduler.core import config

#Import Routers
from scheduler.api.v1 import events
from scheduler.api.v1 import orders
from scheduler.api.v1 import closures

# Create FastAPI app
app = FastAPI(
    title="Activity Scheduling API",
    description="Calendar events and bookings for camps, parties and weekly programs",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
#Include routers
app.include_router(events.router, prefix="/api", tags=["events"])
app.include_router(orders.router, prefix="/api", tags=["orders"])
app.include_router(closures.router, prefix="/api", tags=["closures"])


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Activity Scheduling API",
        "version": "1.0.0",
        "status": "running"
    }

@app.get("/health")
async def health():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "environment": config.APP_ENV
    }
