from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from habitpulse.config import CORS_ORIGINS
from habitpulse.database import init_db
from habitpulse.routes.calendar_routes import router as calendar_router
from habitpulse.routes.goal_routes import router as goal_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(title="Habit Pulse API", lifespan=lifespan)

@app.get("/api/v1/health-check")
async def health():
    return {"status": "ok", "message": "Backend is alive!"}

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Calendar first: its paths share the /goals prefix with "/{goal_id}"
app.include_router(calendar_router)
app.include_router(goal_router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("habitpulse.main:app", host="0.0.0.0", port=8000, reload=True)
