import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from data_extraction import GEETA_API_URL, HTTP_TIMEOUT, ChapterLoader, configure_logging

configure_logging(sys.stdout)

loader = ChapterLoader(base_url=GEETA_API_URL, timeout=HTTP_TIMEOUT)

app = FastAPI(title="Gita Chapter Reader")

# CORS for local dev
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health():
    return {"status": "ok", "api_url": loader.base_url}


@app.get("/api/chapter/{id}")
def chapter(id: str):
    # sync def: runs in the threadpool alongside the blocking requests call
    # upstream failures come back as an error payload with 200
    return loader.load(id)
