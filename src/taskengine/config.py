from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from taskengine.exceptions import SettingsError
from taskengine.logging import get_logger

__all__ = [
    "TaskEngineConfig",
    "PROJECT_CONFIG_FILENAME",
    "load_config",
    "get_user_config_path",
]

logger = get_logger(__name__)

PROJECT_CONFIG_FILENAME = "taskengine.yaml"

# Project config file used by the next TaskEngineConfig(), set by load_config
_project_config_path: Path | None = None


class YamlConfigSource(PydanticBaseSettingsSource):
    """Settings source that reads a YAML mapping from a file."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: Path | None = None,
    ):
        super().__init__(settings_cls)
        self.yaml_file = yaml_file
        self._config_data: dict[str, Any] = {}
        if yaml_file and yaml_file.exists():
            try:
                with open(yaml_file) as f:
                    loaded = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise SettingsError(f"Invalid YAML in {yaml_file}: {e}") from e

            if loaded is None:
                logger.warning(f"Config file {yaml_file} is empty, using defaults.")
            elif not isinstance(loaded, dict):
                raise SettingsError(
                    f"Config file {yaml_file} must contain a mapping",
                    value=loaded,
                )
            else:
                self._config_data = loaded

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        if field_name in self._config_data:
            return self._config_data[field_name], field_name, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        return self._config_data


class TaskEngineConfig(BaseSettings):
    """Settings for the taskengine command-line runner.

    Attributes:
        taskfile: Python file that registers the tasks.
        default_task: Task run when no task name is given.
        detect_cycles: Fail fast on circular dependencies instead of
            recursing until RecursionError.
        verbosity: Log level used when no -v/-q flag is given.
    """

    model_config = SettingsConfigDict(
        env_prefix="TASKENGINE_",
        extra="ignore",
    )

    taskfile: Path = Field(default_factory=lambda: Path("taskfile.py"))
    default_task: str = Field(default="default", min_length=1)
    detect_cycles: bool = True
    verbosity: Literal["error", "warning", "info", "debug"] = "warning"

    @field_validator("default_task")
    @classmethod
    def check_default_task_prefix(cls, v: str) -> str:
        if v.startswith(":"):
            raise ValueError("default_task must not start with ':'")
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the order of settings sources.

        Priority (highest to lowest):
        1. Init arguments
        2. Environment variables (TASKENGINE_*)
        3. Project YAML config (./taskengine.yaml or --config path)
        4. User YAML config (~/.config/taskengine/config.yaml)
        5. Defaults
        """
        project_config_path = (
            _project_config_path or Path.cwd() / PROJECT_CONFIG_FILENAME
        )
        return (
            init_settings,
            env_settings,
            YamlConfigSource(settings_cls, project_config_path),
            YamlConfigSource(settings_cls, get_user_config_path()),
        )


def get_user_config_path() -> Path:
    """Get the path to the user configuration file.

    Returns:
        Path to ~/.config/taskengine/config.yaml
    """
    return Path.home() / ".config" / "taskengine" / "config.yaml"


def load_config(config_path: Path | None = None) -> TaskEngineConfig:
    """Load settings with hierarchy: defaults -> user -> project -> env.

    Args:
        config_path: Optional path to the project config file. Defaults to
            ./taskengine.yaml

    Returns:
        TaskEngineConfig with merged settings.

    Raises:
        SettingsError: If a config file cannot be parsed or a value is invalid.
    """
    if config_path is None:
        config_path = Path.cwd() / PROJECT_CONFIG_FILENAME

    if not config_path.exists():
        logger.debug("No project configuration found, using defaults.")

    global _project_config_path
    _project_config_path = config_path
    try:
        return TaskEngineConfig()
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise SettingsError(
            message=f"Invalid configuration: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e
    finally:
        _project_config_path = None
