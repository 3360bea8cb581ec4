from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Dict, Any, Optional
from pathlib import Path
import structlog
import yaml
import os
from dotenv import load_dotenv

from .exceptions import ConfigurationError

# Load environment variables from .env file
load_dotenv()

logger = structlog.get_logger()

DEFAULT_SYMBOLS = ["NIFTY", "SENSEX", "BANKNIFTY"]
DEFAULT_TAGS = ["nifty50", "sensex", "intraday", "banknifty"]

class ScoringWeights(BaseModel):
    """Weights of the composite score. Not required to sum to one."""
    sentiment_weight: float = Field(0.5, allow_inf_nan=False)
    volume_weight: float = Field(0.2, allow_inf_nan=False)
    momentum_weight: float = Field(0.3, allow_inf_nan=False)

    model_config = ConfigDict(extra="forbid", frozen=True)

class ClassificationThresholds(BaseModel):
    bullish_threshold: float = Field(0.5, allow_inf_nan=False)
    bearish_threshold: float = Field(-0.5, allow_inf_nan=False)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="after")
    def _check_order(self) -> "ClassificationThresholds":
        if self.bearish_threshold >= self.bullish_threshold:
            raise ValueError("bearish_threshold must be less than bullish_threshold")
        return self

class EngineConfig(BaseModel):
    """Tunable parameters of the signal engine"""
    symbols: List[str] = Field(default_factory=lambda: list(DEFAULT_SYMBOLS))
    window_size: int = Field(100, ge=1)
    min_posts: int = Field(10, ge=1)
    recent_window_minutes: float = Field(60, gt=0)

    # Momentum
    momentum_lookback: int = Field(10, ge=2)
    momentum_min_history: int = Field(2, ge=2)
    momentum_clip: float = Field(3.0, gt=0, allow_inf_nan=False)
    std_floor: float = Field(0.01, gt=0, allow_inf_nan=False)
    stddev_ddof: int = Field(1, ge=0, le=1)

    # Sentiment / confidence
    engagement_sentiment_factor: float = Field(0.1, allow_inf_nan=False)
    sample_size_target: float = Field(100, gt=0)
    engagement_target: float = Field(5.0, gt=0)
    magnitude_target: float = Field(2.0, gt=0)

    max_workers: int = Field(1, ge=1)

    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    thresholds: ClassificationThresholds = Field(default_factory=ClassificationThresholds)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("symbols")
    @classmethod
    def _check_symbols(cls, value: List[str]) -> List[str]:
        cleaned = [symbol.strip() for symbol in value]
        if not cleaned:
            raise ValueError("at least one symbol must be tracked")
        if any(not symbol for symbol in cleaned):
            raise ValueError("symbol names must not be blank")
        if len({symbol.upper() for symbol in cleaned}) != len(cleaned):
            raise ValueError("symbol names must be unique (case-insensitive)")
        return cleaned

class AppConfig(BaseModel):
    tags: List[str] = Field(default_factory=lambda: list(DEFAULT_TAGS))
    target_count: int = Field(2000, ge=1)
    collection_timeout_seconds: float = Field(600, gt=0)
    synthetic_backfill: bool = True
    synthetic_seed: Optional[int] = None

    model_config = ConfigDict(extra="forbid", frozen=True)

class Settings(BaseSettings):
    app_name: str = "Marketsense"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    environment: str = "development"
    config_dir: str = "config"
    log_dir: str = "logs"

    model_config = SettingsConfigDict(
        env_prefix="MARKETSENSE_",
        env_file=".env",
        extra="ignore"
    )

def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML file"""
    if path is None:
        path = os.path.join(settings.config_dir, f"{settings.environment}.yaml")

    config_path = Path(path)
    if not config_path.is_file():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as file:
        try:
            config = yaml.safe_load(file)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise ConfigurationError(f"Configuration root must be a mapping: {config_path}")

    # Expand environment variables
    config = _expand_env_vars(config)
    logger.debug("Configuration loaded", path=str(config_path), sections=list(config.keys()))
    return config

def _expand_env_vars(obj):
    """Recursively expand environment variables in config"""
    if isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    elif isinstance(obj, str) and obj.startswith("${") and obj.endswith("}"):
        env_var = obj[2:-1]
        return os.getenv(env_var, obj)
    return obj

def _load_section(model, section: str, config: Optional[Dict[str, Any]]):
    raw = (config or {}).get(section) or {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Configuration section '{section}' must be a mapping")

    try:
        return model.model_validate(raw)
    except ValidationError as e:
        errors = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        logger.error("Configuration validation failed", section=section, errors=errors)
        message = f"Configuration section '{section}' validation failed:\n"
        message += "\n".join(f"  - {error}" for error in errors)
        raise ConfigurationError(message) from e

def load_engine_config(config: Optional[Dict[str, Any]] = None) -> EngineConfig:
    """
    Build the engine configuration from the ``engine`` section of a loaded config.

    Args:
        config: Full configuration dictionary (as returned by load_config)

    Returns:
        Validated EngineConfig, defaults applied for missing keys

    Raises:
        ConfigurationError: If the section is invalid
    """
    return _load_section(EngineConfig, "engine", config)

def load_app_config(config: Optional[Dict[str, Any]] = None) -> AppConfig:
    """Build the pipeline configuration from the ``app`` section"""
    return _load_section(AppConfig, "app", config)

# Global settings instance
settings = Settings()
