import os
from dotenv import load_dotenv

# Values already present in the environment win over .env
load_dotenv(override=False)

SQLALCHEMY_DATABASE_URL = os.getenv("SQLALCHEMY_DATABASE_URL", "sqlite:///./workout_engine.db")

# Bounded retry for persistence writes (blueprint save, usage touch, tracker terminal writes)
DB_RETRY_ATTEMPTS = int(os.getenv("DB_RETRY_ATTEMPTS", "3"))
DB_RETRY_BASE_DELAY_MS = int(os.getenv("DB_RETRY_BASE_DELAY_MS", "100"))
