import os
from pathlib import Path
from string import Template
from typing import Optional

import structlog
import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from resume_extractor.models.config import ExtractionConfig
from resume_extractor.utils.exceptions import ConfigValidationError

logger = structlog.get_logger()


class ConfigManager:
    """Loads extraction settings from a YAML file"""

    def __init__(self, config_path: str = "config/extraction.yaml"):
        self.config_path = Path(config_path)
        self.env_loaded = False
        self._config: Optional[ExtractionConfig] = None

    def load_config(self) -> ExtractionConfig:
        """Load and validate configuration

        Raises:
            FileNotFoundError: Config file does not exist
            ConfigValidationError: File is unreadable, not YAML, or invalid
        """
        if self._config:
            return self._config

        # 1. Load environment
        if not self.env_loaded:
            load_dotenv()
            self.env_loaded = True

        # 2. Check file existence
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        # 3. Read YAML
        try:
            raw_content = self.config_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigValidationError(f"Failed to read config file: {e}") from e

        # 4. Substitute env vars, leaving unknown ${VAR} untouched
        try:
            substituted = Template(raw_content).safe_substitute(os.environ)
            config_data = yaml.safe_load(substituted)
        except yaml.YAMLError as e:
            raise ConfigValidationError(
                f"Failed to parse YAML or substitute variables: {e}"
            ) from e

        if config_data is None:
            config_data = {}
        if not isinstance(config_data, dict):
            raise ConfigValidationError(
                "Invalid configuration: top level must be a mapping"
            )

        # 5. Validate with Pydantic
        try:
            self._config = ExtractionConfig.model_validate(config_data)
        except ValidationError as e:
            raise ConfigValidationError(f"Invalid configuration: {e}") from e

        logger.info(
            "config_loaded",
            path=str(self.config_path),
            pdf_backend=self._config.pdf.backend.value,
            min_text_length=self._config.text_processing.min_text_length,
        )
        return self._config
