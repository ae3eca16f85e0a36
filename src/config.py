"""Configuration management"""
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Storage
DATA_PATH: Path = Path(os.getenv("DATA_PATH", "./data"))

# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Hosted language model (chat + thought analysis)
GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
CHAT_MODEL: str = os.getenv("CHAT_MODEL", "gemini-3-flash-preview")
GEMINI_API_URL: str = os.getenv(
    "GEMINI_API_URL", "https://generativelanguage.googleapis.com/v1beta"
)
CHAT_TIMEOUT_SECONDS: float = float(os.getenv("CHAT_TIMEOUT_SECONDS", "30"))

# Progression
# Threshold for the next level is floor(threshold * XP_GROWTH_FACTOR)
XP_GROWTH_FACTOR: float = float(os.getenv("XP_GROWTH_FACTOR", "1.3"))
INITIAL_XP_TO_NEXT_LEVEL: int = int(os.getenv("INITIAL_XP_TO_NEXT_LEVEL", "500"))

# Feedback timings (milliseconds)
POPUP_DURATION_MS: int = int(os.getenv("POPUP_DURATION_MS", "1200"))
GAINING_XP_FLASH_MS: int = int(os.getenv("GAINING_XP_FLASH_MS", "600"))
LEVEL_UP_DURATION_MS: int = int(os.getenv("LEVEL_UP_DURATION_MS", "3000"))

# Awards of at least this amount play the "major" tone
MAJOR_AWARD_THRESHOLD: int = int(os.getenv("MAJOR_AWARD_THRESHOLD", "100"))

# Where popups render when the caller gives no origin (center of a 390x844 viewport)
POPUP_DEFAULT_X: float = float(os.getenv("POPUP_DEFAULT_X", "195"))
POPUP_DEFAULT_Y: float = float(os.getenv("POPUP_DEFAULT_Y", "422"))

SOUND_ENABLED: bool = os.getenv("SOUND_ENABLED", "true").lower() == "true"


# Validation
def validate_config() -> None:
    """Validate progression and feedback configuration"""
    if XP_GROWTH_FACTOR <= 1:
        raise ValueError("XP_GROWTH_FACTOR must be greater than 1")
    if INITIAL_XP_TO_NEXT_LEVEL <= 0:
        raise ValueError("INITIAL_XP_TO_NEXT_LEVEL must be positive")
    for name, value in (
        ("POPUP_DURATION_MS", POPUP_DURATION_MS),
        ("GAINING_XP_FLASH_MS", GAINING_XP_FLASH_MS),
        ("LEVEL_UP_DURATION_MS", LEVEL_UP_DURATION_MS),
    ):
        if value <= 0:
            raise ValueError(f"{name} must be positive")
    # GEMINI_API_KEY is optional: chat is disabled without it
