# salon_booking/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from salon_booking.config import LOG_LEVEL
from salon_booking.db import create_db_and_tables
from salon_booking.routers import availability_routes, reservations_routes, schedules_routes

logging.basicConfig(
    level=LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    logging.info("Salon booking API started")
    yield


app = FastAPI(title="Salon booking", lifespan=lifespan)

app.include_router(availability_routes.router)
app.include_router(schedules_routes.router)
app.include_router(reservations_routes.router)


@app.get("/health")
def health_check():
    return {"status": "ok"}
