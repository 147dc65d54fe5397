"""
Configuration management for the screen capture analytics backend.
Loads configuration from environment variables and .env file.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
# Look for .env file in the backend directory or project root
BACKEND_DIR = Path(__file__).parent.parent
PROJECT_ROOT = BACKEND_DIR.parent
ENV_FILE = PROJECT_ROOT / ".env"

# Load .env file if it exists
if ENV_FILE.exists():
    load_dotenv(ENV_FILE)
else:
    # Also try loading from backend directory
    backend_env = BACKEND_DIR / ".env"
    if backend_env.exists():
        load_dotenv(backend_env)

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Capture gate
MIN_CAPTURE_CONFIDENCE = float(os.getenv("MIN_CAPTURE_CONFIDENCE", "20"))  # 0-100, exclusive
SLIDE_CHANGE_THRESHOLD = float(os.getenv("SLIDE_CHANGE_THRESHOLD", "0.4"))

# Session buffer limits (oldest evicted first)
MAX_SESSION_CAPTURES = int(os.getenv("MAX_SESSION_CAPTURES", "100"))
MAX_AUDIO_SEGMENTS = int(os.getenv("MAX_AUDIO_SEGMENTS", "500"))

# Content classification
CODE_SCORE_THRESHOLD = float(os.getenv("CODE_SCORE_THRESHOLD", "1.5"))
TERMINAL_LINE_RATIO = float(os.getenv("TERMINAL_LINE_RATIO", "0.2"))
CHAT_LINE_RATIO = float(os.getenv("CHAT_LINE_RATIO", "0.3"))

# Summarization
KEY_SENTENCE_COUNT = int(os.getenv("KEY_SENTENCE_COUNT", "5"))
SUMMARY_KEYWORD_COUNT = int(os.getenv("SUMMARY_KEYWORD_COUNT", "15"))
SLIDE_KEYWORD_COUNT = int(os.getenv("SLIDE_KEYWORD_COUNT", "5"))

# Topic clustering
MAX_CLUSTER_KEYWORDS = int(os.getenv("MAX_CLUSTER_KEYWORDS", "15"))
MAX_CLUSTER_SIZE = int(os.getenv("MAX_CLUSTER_SIZE", "5"))
MIN_COOCCURRENCE = int(os.getenv("MIN_COOCCURRENCE", "1"))

# OCR engine
TESSERACT_CMD = os.getenv("TESSERACT_CMD", None)  # None uses tesseract from PATH
TESSERACT_LANG = os.getenv("TESSERACT_LANG", "eng")
