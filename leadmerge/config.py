# leadmerge/config.py
from dotenv import load_dotenv
import os

load_dotenv()

# Storage
DATA_DIR = os.getenv("LEADMERGE_DATA_DIR", "backend")
DEFAULT_DATASET = os.getenv("LEADMERGE_DEFAULT_DATASET", "leads.csv")
DATASET_EXTENSION = ".csv"

# Runtime parameters
MAX_UPLOAD_BYTES = int(os.getenv("LEADMERGE_MAX_UPLOAD_BYTES", 50 * 1024 * 1024))
CONCURRENCY = int(os.getenv("LEADMERGE_CONCURRENCY", 4))
LOG_LEVEL = os.getenv("LEADMERGE_LOG_LEVEL", "INFO")
