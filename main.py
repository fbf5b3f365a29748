import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Routers
from routers.health import router as health_router
from routers.review import router as review_router
from routers.topics import router as topics_router
from routers.verifications import router as verifications_router

logger = logging.getLogger("question-verification")
logging.basicConfig(level=logging.INFO)

app = FastAPI(title="Question Verification API")

# Allow calls from the admin UI dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*", "x-reviewer-id"],
)


@app.get("/")
def health_root():
    return {"ok": True}


app.include_router(verifications_router)  # /verifications/...
app.include_router(topics_router)  # /topics/...
app.include_router(review_router)  # /review-sessions/...
app.include_router(health_router)  # /health/...
