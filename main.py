from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import API_NAME, CORS_ORIGINS
from db import init_db
from routes.forecast import router as forecast_router

app = FastAPI(title=API_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def startup():
    init_db()


app.include_router(forecast_router)
