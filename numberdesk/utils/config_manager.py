"""Persistent settings stored as JSON and validated with pydantic."""

from pathlib import Path
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .errors import FileSystemError, InvalidConfigError, MissingConfigError
from .logging import get_logger, log_call
from .paths import CONFIG_PATH

logger = get_logger(__name__)


class ApiConfig(BaseModel):
    """Admin API connection."""

    model_config = ConfigDict(validate_assignment=True)

    base_url: str = "http://localhost:3000"
    token: str = ""
    timeout: float = Field(default=30.0, gt=0)  # seconds
    page_size: int = Field(default=10, ge=1, le=100)


class BatchConfig(BaseModel):
    """Batch execution settings."""

    model_config = ConfigDict(validate_assignment=True)

    # Pause between reputation lookups, drawn from [min, max)
    reputation_delay_min: float = 3.0
    reputation_delay_max: float = 8.0
    allow_concurrent_jobs: bool = False
    confirm_before_run: bool = True

    @model_validator(mode="after")
    def _check_delay_bounds(self) -> "BatchConfig":
        if self.reputation_delay_min < 0:
            raise ValueError("reputation_delay_min must not be negative")
        if self.reputation_delay_max < self.reputation_delay_min:
            raise ValueError("reputation_delay_max must not be below reputation_delay_min")
        return self


class LoggingConfig(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    log_level: str = "INFO"


class AppConfig(BaseModel):
    version: str = "0.1.0"
    api: ApiConfig = Field(default_factory=ApiConfig)
    batch: BatchConfig = Field(default_factory=BatchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigManager:
    """Process-wide access to the persisted ``AppConfig``.

    The first instantiation loads the JSON file, writing defaults if it does
    not exist yet. Later instantiations return the same object until
    ``reset_instance`` is called.
    """

    _instance: Optional["ConfigManager"] = None

    def __new__(cls, config_path: Optional[Path] = None):
        if cls._instance is None:
            instance = super().__new__(cls)
            instance.path = Path(config_path) if config_path else CONFIG_PATH
            instance.config = instance._load()
            cls._instance = instance
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        cls._instance = None

    def _load(self) -> AppConfig:
        if not self.path.exists():
            logger.info(f"No configuration at {self.path}, writing defaults")
            config = AppConfig()
            self._write(config)
            return config

        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise FileSystemError(f"Cannot read configuration file {self.path}: {e}") from e

        try:
            config = AppConfig.model_validate_json(raw)
        except ValidationError as e:
            logger.error(f"Rejected configuration file {self.path}: {e}")
            raise InvalidConfigError(f"{self.path} is not a valid configuration: {e}") from e

        logger.debug(f"Configuration loaded from {self.path}")
        return config

    def _write(self, config: AppConfig) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(config.model_dump_json(indent=2), encoding="utf-8")
        except OSError as e:
            raise FileSystemError(f"Cannot write configuration file {self.path}: {e}") from e

    def _resolve(self, key_path: str) -> Tuple[BaseModel, str]:
        """Split ``section.key`` into the owning model and the field name.

        Raises:
            MissingConfigError: If any part of the path does not exist.
        """
        *sections, field = key_path.split(".")
        node: Any = self.config
        for section in sections:
            node = getattr(node, section, None)
            if not isinstance(node, BaseModel):
                raise MissingConfigError(f"Unknown configuration section in '{key_path}'")

        if field not in type(node).model_fields:
            raise MissingConfigError(f"Unknown configuration key '{key_path}'")
        return node, field

    def get_config(self, key_path: str, default: Any = None) -> Any:
        """Value at a dotted path such as ``batch.reputation_delay_max``."""
        try:
            node, field = self._resolve(key_path)
        except MissingConfigError:
            return default
        return getattr(node, field)

    @log_call
    def set_config(self, key_path: str, value: Any, persist: bool = True) -> None:
        """Validate and store a value; strings are coerced to the field type.

        Raises:
            MissingConfigError: If the key does not exist.
            InvalidConfigError: If the value fails validation.
        """
        node, field = self._resolve(key_path)

        # The section is left untouched when validation fails
        candidate = node.model_dump()
        candidate[field] = value
        try:
            validated = type(node).model_validate(candidate)
        except ValidationError as e:
            raise InvalidConfigError(
                f"Invalid value for '{key_path}': {e.errors()[0]['msg']}"
            ) from e

        setattr(node, field, getattr(validated, field))

        if persist:
            self._write(self.config)
        logger.info(f"Configuration '{key_path}' updated")

    @log_call
    def reset_to_defaults(self) -> None:
        logger.warning("Resetting configuration to defaults")
        self.config = AppConfig()
        self._write(self.config)
