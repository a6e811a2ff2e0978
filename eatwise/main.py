from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes.analyze_food import router as analyze_food_router
from .routes.recipe import router as recipe_router

app = FastAPI(
    title="EATWISE Consumer Health Co-Pilot",
    version="1.1.0",
    description="Food photo safety and nutrition analysis backed by Gemini.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health():
    return {"status": "ok", "service": "eatwise-copilot"}


app.include_router(analyze_food_router)
app.include_router(recipe_router)
