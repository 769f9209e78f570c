# postgen/config.py
import os
from dataclasses import dataclass
from typing import List, Optional

def _env_bool(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on"}

def _env_csv(name: str, default: str = "*") -> List[str]:
    raw = os.getenv(name, default)
    return [x.strip() for x in raw.split(",") if x.strip()]

def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)

def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)

@dataclass(frozen=True)
class Config:
    # Gemini
    gemini_api_key: str
    gemini_base_url: Optional[str]    # proxy host; None -> SDK default
    gemini_text_model: str
    gemini_image_model: str
    http_timeout_ms: int
    text_max_output_tokens: int
    text_temperature: float
    image_aspect_ratio: str
    # Fallback image service (URL construction only)
    fallback_image_url: str
    fallback_image_width: int
    fallback_image_height: int
    # Progress simulation
    progress_tick_seconds: float
    progress_ceiling: int
    progress_done_hold_seconds: float
    # API / CORS
    allowed_origins: List[str]
    allow_credentials: bool
    # Logging
    log_level: str

def load_config() -> Config:
    return Config(
        gemini_api_key = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY", ""),
        gemini_base_url = os.getenv("GEMINI_BASE_URL") or None,
        gemini_text_model = os.getenv("GEMINI_TEXT_MODEL", "gemini-3-flash-preview"),
        gemini_image_model = os.getenv("GEMINI_IMAGE_MODEL", "gemini-2.5-flash-image"),
        http_timeout_ms = _env_int("HTTP_TIMEOUT_MS", 120_000),
        text_max_output_tokens = _env_int("TEXT_MAX_OUTPUT_TOKENS", 4096),
        text_temperature = _env_float("TEXT_TEMPERATURE", 0.9),
        image_aspect_ratio = os.getenv("IMAGE_ASPECT_RATIO", "3:4"),
        fallback_image_url = os.getenv("FALLBACK_IMAGE_URL", "https://image.pollinations.ai/prompt"),
        fallback_image_width = _env_int("FALLBACK_IMAGE_WIDTH", 1080),
        fallback_image_height = _env_int("FALLBACK_IMAGE_HEIGHT", 1440),
        progress_tick_seconds = _env_float("PROGRESS_TICK_SECONDS", 0.4),
        progress_ceiling = _env_int("PROGRESS_CEILING", 92),
        progress_done_hold_seconds = _env_float("PROGRESS_DONE_HOLD_SECONDS", 0.8),
        allowed_origins = _env_csv("ALLOWED_ORIGINS", "*"),
        allow_credentials = _env_bool("ALLOW_CREDENTIALS", False),
        log_level = os.getenv("LOG_LEVEL", "INFO"),
    )

# Load once
config = load_config()
