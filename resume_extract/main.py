import logging

from fastapi import FastAPI
from resume_extract.api.routes.parse import router as parse_router

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Resume Extract",
    description="Rule-based structuring of free-form resume text into contact info, summary, work experience, education and skills",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.include_router(parse_router)


@app.get("/", tags=["health"])
def root():
    return {"service": "resume-extract", "status": "running", "endpoints": ["/parse", "/parse/text"]}


@app.get("/health", tags=["health"])
def health():
    return {"status": "ok"}
