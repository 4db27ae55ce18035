import os
import yaml
from pathlib import Path
from string import Template
from typing import Optional
from dotenv import load_dotenv
import structlog
from pydantic import ValidationError

from rgnotify.models.config import AppConfig
from rgnotify.observability.logging import configure_from_settings
from rgnotify.services.notification import HistoryStore
from rgnotify.services.notification_service import Notifier
from rgnotify.services.transport import MailTransport
from rgnotify.utils.exceptions import ConfigValidationError

logger = structlog.get_logger()


class ConfigManager:
    """Loads notifier configuration and builds configured notifiers"""

    def __init__(
        self,
        config_path: str = "config/rgnotify.yaml",
        project_root: Optional[Path] = None,
    ):
        self.config_path = Path(config_path)
        self.project_root = project_root or Path.cwd()
        self.env_loaded = False
        self._config: Optional[AppConfig] = None

    def load_config(self) -> AppConfig:
        """Load and validate configuration"""
        if self._config:
            return self._config

        # 1. Load environment
        if not self.env_loaded:  # pragma: no cover
            load_dotenv()
            self.env_loaded = True

        # 2. Check file existence
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        # 3. Read YAML
        try:
            with open(self.config_path, encoding="utf-8") as f:
                raw_content = f.read()
        except OSError as e:
            raise ConfigValidationError(f"Failed to read config file: {e}")

        # 4. Substitute env vars
        try:
            template = Template(raw_content)
            substituted_content = template.safe_substitute(os.environ)
            config_data = yaml.safe_load(substituted_content) or {}
        except yaml.YAMLError as e:
            raise ConfigValidationError(
                f"Failed to parse YAML or substitute variables: {e}"
            )

        if not isinstance(config_data, dict):
            raise ConfigValidationError("Configuration root must be a mapping")

        # 5. Validate with Pydantic
        try:
            self._config = AppConfig(**config_data)
        except ValidationError as e:
            raise ConfigValidationError(f"Invalid configuration: {e}")

        self._resolve_history_path(self._config)
        logger.info(
            "config_loaded",
            path=str(self.config_path),
            notifications=len(self._config.notifier.notifications),
            days_to_wait=self._config.notifier.days_to_wait,
        )
        return self._config

    def _resolve_history_path(self, config: AppConfig) -> None:
        """Anchor a relative history path at the project root"""
        history = config.notifier.history
        if not history.path.is_absolute():
            history.path = self.project_root / history.path

    def create_notifier(
        self, transport: MailTransport, configure_logs: bool = True
    ) -> Notifier:
        """Build a Notifier from the loaded configuration

        Also applies the logging block unless configure_logs is False.
        """
        config = self.load_config()
        if configure_logs:
            configure_from_settings(config.logging)

        settings = config.notifier
        store = HistoryStore(
            path=settings.history.path,
            fail_on_corrupt=settings.history.fail_on_corrupt,
        )
        return Notifier(transport, settings=settings, history_store=store)
