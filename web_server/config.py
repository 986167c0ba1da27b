import os

from dotenv import load_dotenv

load_dotenv()

MONGODB_URL = os.getenv("MONGODB_URL", "mongodb://localhost:27017")
MONGODB_DB = os.getenv("MONGODB_DB", "mentorship")

# Cached match scores are served for this long before recomputation
MATCH_CACHE_TTL_SECONDS = int(os.getenv("MATCH_CACHE_TTL_SECONDS", "3600"))
# 0 disables the background sweep
MATCH_CACHE_SWEEP_INTERVAL_SECONDS = int(os.getenv("MATCH_CACHE_SWEEP_INTERVAL_SECONDS", "900"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
