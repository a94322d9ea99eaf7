from fastapi import FastAPI
from glamrent.database import Base, engine
from fastapi.middleware.cors import CORSMiddleware
from glamrent.middleware import add_request_id_and_process_time
from glamrent.models import booking_model, listing_model, notification_model  # noqa: F401
from glamrent.routes.booking_route import booking_router
from glamrent.routes.notification_route import notification_router


Base.metadata.create_all(bind=engine)
app = FastAPI(
    title="GlamRent Bookings API",
    version="1.0.0",
    description="Booking lifecycle for a gown and dress rental marketplace: renters request bookings, "
                "freelancers confirm, reject or complete them, and both sides are notified.",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(add_request_id_and_process_time)


@app.get("/", status_code=200)
async def home():
    return {"message": "Welcome to the GlamRent bookings API"}


app.include_router(booking_router, prefix="/api", tags=["Bookings"])
app.include_router(notification_router, prefix="/api", tags=["Notifications"])
