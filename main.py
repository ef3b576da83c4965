from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from dotenv import load_dotenv

from recommendation.logic.config import load_settings
from recommendation.routes import router as recommendation_router

load_dotenv()

settings = load_settings()
logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
logging.info(f"Career guidance engine starting (log level {settings.log_level})")

app = FastAPI(title="Career Guidance Engine")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(recommendation_router)


@app.get("/", tags=["meta"])
def root():
    return {"service": "career-guidance-engine", "docs": "/docs"}
