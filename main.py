from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from dotenv import load_dotenv

load_dotenv()

from college_recommendation.routes import router as recommendation_router

logging.basicConfig(level=logging.INFO)
logging.info("App starting: college recommendation API")

app = FastAPI(title="College Recommendation API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(recommendation_router)


@app.get("/")
def root():
    return {"status": "ok"}
