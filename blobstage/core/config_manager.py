"""
Configuration management for blobstage.

Handles loading, validation, and access to configuration settings.
"""

import os
import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from enum import Enum

import yaml
from pydantic import BaseModel, Field, field_validator, ValidationError

from blobstage.auth.credentials import AccountType, DEFAULT_ENDPOINT_SUFFIX
from blobstage.storage.naming import MAX_CONTAINER_NAME_LENGTH, MIN_CONTAINER_NAME_LENGTH

logger = logging.getLogger(__name__)


class LogLevel(str, Enum):
    """Valid log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: LogLevel = LogLevel.INFO
    format: str = "text"
    file: Optional[str] = None
    rotation_size: str = "10MB"
    rotation_count: int = 5
    module_levels: Optional[Dict[str, str]] = Field(
        default=None,
        description="Per-module log levels, e.g., {'blobstage.provisioner': 'DEBUG'}"
    )


class StorageConfig(BaseModel):
    """Blob storage endpoint and naming configuration."""
    endpoint_suffix: str = Field(
        default=DEFAULT_ENDPOINT_SUFFIX,
        description="DNS suffix appended to the account name to form the blob endpoint"
    )
    max_container_name_length: int = Field(
        default=MAX_CONTAINER_NAME_LENGTH,
        ge=MIN_CONTAINER_NAME_LENGTH,
        le=63,
        description="Upper bound for generated container names"
    )
    location_d_client_account: AccountType = Field(
        default=AccountType.DEFAULT,
        description="Account whose endpoint locD builds the source container URL from"
    )
    
    @field_validator("location_d_client_account", mode="before")
    @classmethod
    def parse_account(cls, v: Any) -> Any:
        """Accept account names ("default", "secondary") as well as prefixes."""
        if isinstance(v, str) and v.upper() in AccountType.__members__:
            return AccountType[v.upper()]
        return v


class BlobStageConfig(BaseModel):
    """Main blobstage configuration schema."""
    
    version: str = Field(default="0.1.0", description="Configuration version")
    
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    
    storage: StorageConfig = Field(default_factory=StorageConfig)
    
    output_dir: str = Field(default=".", description="Directory manifests are written to")
    
    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """Validate version format."""
        parts = v.split(".")
        if len(parts) != 3:
            raise ValueError("Version must be in format x.y.z")
        for part in parts:
            if not part.isdigit():
                raise ValueError("Version components must be numeric")
        return v
    


class ConfigManager:
    """
    Manages blobstage configuration loading and validation.
    
    Configuration precedence (highest to lowest):
    1. CLI arguments
    2. Environment variables (BLOBSTAGE_*)
    3. Configuration file (YAML/JSON)
    4. Defaults
    """
    
    def __init__(self):
        self._config: Optional[BlobStageConfig] = None
        self._config_file: Optional[Path] = None
    
    def load(
        self,
        config_file: Optional[str] = None,
        cli_overrides: Optional[Dict[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None
    ) -> BlobStageConfig:
        """
        Load and validate configuration from multiple sources.
        
        Args:
            config_file: Path to configuration file (YAML or JSON)
            cli_overrides: Dictionary of CLI argument overrides
            environ: Environment mapping (defaults to os.environ)
        
        Returns:
            Validated BlobStageConfig instance
        
        Raises:
            ValidationError: If configuration is invalid
            FileNotFoundError: If specified config file doesn't exist
        """
        logger.debug("Loading blobstage configuration")
        
        config_dict: Dict[str, Any] = {}
        
        if config_file:
            config_dict = self._load_from_file(config_file)
            self._config_file = Path(config_file)
            logger.debug(f"Loaded configuration from file: {config_file}")
        
        env_config = self._load_from_env(os.environ if environ is None else environ)
        config_dict = self._merge_configs(config_dict, env_config)
        if env_config:
            logger.debug(f"Applied {len(env_config)} environment variable overrides")
        
        if cli_overrides:
            config_dict = self._merge_configs(config_dict, cli_overrides)
            logger.debug(f"Applied {len(cli_overrides)} CLI argument overrides")
        
        try:
            self._config = BlobStageConfig(**config_dict)
        except ValidationError as e:
            logger.error(f"Configuration validation failed: {e}")
            raise
        
        self._log_configuration()
        return self._config
    
    def _load_from_file(self, file_path: str) -> Dict[str, Any]:
        """Load configuration from YAML or JSON file."""
        path = Path(file_path)
        
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")
        
        with open(path, 'r') as f:
            if path.suffix in ['.yaml', '.yml']:
                return yaml.safe_load(f) or {}
            elif path.suffix == '.json':
                return json.load(f)
            else:
                raise ValueError(f"Unsupported config file format: {path.suffix}")
    
    def _load_from_env(self, environ: Mapping[str, str]) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config: Dict[str, Any] = {}
        
        # Logging configuration
        if log_level := environ.get("BLOBSTAGE_LOG_LEVEL"):
            config.setdefault("logging", {})["level"] = log_level.upper()
        if log_format := environ.get("BLOBSTAGE_LOG_FORMAT"):
            config.setdefault("logging", {})["format"] = log_format.lower()
        if log_file := environ.get("BLOBSTAGE_LOG_FILE"):
            config.setdefault("logging", {})["file"] = log_file
        
        # Storage configuration
        if endpoint_suffix := environ.get("BLOBSTAGE_ENDPOINT_SUFFIX"):
            config.setdefault("storage", {})["endpoint_suffix"] = endpoint_suffix
        
        if output_dir := environ.get("BLOBSTAGE_OUTPUT_DIR"):
            config["output_dir"] = output_dir
        
        return config
    
    def _merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two configuration dictionaries."""
        result = base.copy()
        
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value
        
        return result
    
    def _log_configuration(self) -> None:
        """Log the loaded configuration."""
        if not self._config:
            return
        
        config_dict = self._config.model_dump(mode="json")
        logger.debug(f"Active configuration: {json.dumps(config_dict, indent=2)}")
    
    def get_config(self) -> BlobStageConfig:
        """
        Get the loaded configuration.
        
        Returns:
            BlobStageConfig instance
        
        Raises:
            RuntimeError: If configuration hasn't been loaded
        """
        if self._config is None:
            raise RuntimeError("Configuration not loaded. Call load() first.")
        return self._config
    
    def reload(self) -> BlobStageConfig:
        """
        Reload configuration from the same sources.
        
        Returns:
            Reloaded BlobStageConfig instance
        """
        config_file = str(self._config_file) if self._config_file else None
        return self.load(config_file=config_file)
