from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from supportdesk.core.config import settings
from supportdesk.core.database import SessionLocal, init_db
from supportdesk.core.errors import SupportDeskError
from supportdesk.core.logging import setup_logging
from supportdesk.routers import message, ticket, user


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL)
    init_db()
    if settings.SEED_ON_STARTUP:
        from supportdesk.seed import seed

        db = SessionLocal()
        try:
            seed(db)
        finally:
            db.close()
    yield


app = FastAPI(title="Support Desk", lifespan=lifespan)

app.include_router(user.router)
app.include_router(ticket.router)
app.include_router(message.router)


@app.exception_handler(SupportDeskError)
async def support_desk_error_handler(request: Request, exc: SupportDeskError):
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


@app.get("/", response_class=JSONResponse)
def read_root():
    return {"message": "Support desk API. See /docs for the endpoints."}


@app.get("/health")
def health():
    return {"status": "ok"}
