import logging
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv(override=True)

logger = logging.getLogger(__name__)

# Application Config
MODEL_NAME = os.getenv("MODEL_NAME", "meta-llama/llama-4-scout-17b-16e-instruct")
MODEL_TEMPERATURE = float(os.getenv("MODEL_TEMPERATURE", "0"))
SUPPORTED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".bmp", ".tiff"}
OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", "output"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Scoresheets
SCORESHEET_LANGUAGE = os.getenv("SCORESHEET_LANGUAGE", "English")
OCR_MAX_WORKERS = int(os.getenv("OCR_MAX_WORKERS", "2"))
DEFAULT_PGN_DATE = "????.??.??"

# Tracing
LANGCHAIN_TRACING_V2 = os.getenv("LANGCHAIN_TRACING_V2", "false").lower() == "true"
LANGCHAIN_PROJECT = os.getenv("LANGCHAIN_PROJECT", "ChessSheetOCR")
GROQ_API_KEY = os.getenv("GROQ_API_KEY")

if not GROQ_API_KEY:
    logger.warning("GROQ_API_KEY is not set in environment variables; OCR extraction is unavailable.")
