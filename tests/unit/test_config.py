from __future__ import annotations

import os
from pathlib import Path

import pytest


@pytest.fixture
def fake_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the user config lookup at an empty directory."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: home))
    return home


def test_load_defaults_when_no_config(
    clean_env: None, temp_dir: Path, fake_home: Path
) -> None:
    """Test that defaults are used when no config file exists."""
    os.chdir(temp_dir)

    from taskengine.config import TaskEngineConfig, load_config

    config = load_config()
    assert isinstance(config, TaskEngineConfig)
    assert config.taskfile == Path("taskfile.py")
    assert config.default_task == "default"
    assert config.detect_cycles is True
    assert config.verbosity == "warning"


def test_load_project_config(
    clean_env: None, temp_dir: Path, fake_home: Path
) -> None:
    """Test loading configuration from taskengine.yaml."""
    os.chdir(temp_dir)
    (temp_dir / "taskengine.yaml").write_text(
        "taskfile: tasks/main.py\n"
        "default_task: build\n"
        "detect_cycles: false\n"
        "verbosity: info\n"
    )

    from taskengine.config import load_config

    config = load_config()
    assert config.taskfile == Path("tasks/main.py")
    assert config.default_task == "build"
    assert config.detect_cycles is False
    assert config.verbosity == "info"


def test_explicit_config_path(clean_env: None, temp_dir: Path, fake_home: Path) -> None:
    """Test that --config style paths replace the project default."""
    os.chdir(temp_dir)
    (temp_dir / "taskengine.yaml").write_text("default_task: ignored\n")
    custom = temp_dir / "ci.yaml"
    custom.write_text("default_task: ci\n")

    from taskengine.config import load_config

    assert load_config(custom).default_task == "ci"


def test_user_config_is_lower_priority(
    clean_env: None, temp_dir: Path, fake_home: Path
) -> None:
    """Test that project values override user values key by key."""
    os.chdir(temp_dir)
    user_config = fake_home / ".config" / "taskengine" / "config.yaml"
    user_config.parent.mkdir(parents=True)
    user_config.write_text("default_task: user\nverbosity: debug\n")
    (temp_dir / "taskengine.yaml").write_text("default_task: project\n")

    from taskengine.config import get_user_config_path, load_config

    assert get_user_config_path() == user_config
    config = load_config()
    assert config.default_task == "project"
    assert config.verbosity == "debug"


def test_env_var_overrides(clean_env: None, temp_dir: Path, fake_home: Path) -> None:
    """Test that TASKENGINE_* environment variables override config."""
    os.chdir(temp_dir)
    (temp_dir / "taskengine.yaml").write_text("default_task: build\n")
    os.environ["TASKENGINE_DEFAULT_TASK"] = "release"
    os.environ["TASKENGINE_DETECT_CYCLES"] = "false"

    from taskengine.config import load_config

    config = load_config()
    assert config.default_task == "release"
    assert config.detect_cycles is False


def test_invalid_value_raises_settings_error(
    clean_env: None, temp_dir: Path, fake_home: Path
) -> None:
    """Test that invalid configuration raises SettingsError."""
    os.chdir(temp_dir)
    (temp_dir / "taskengine.yaml").write_text("verbosity: loud\n")

    from taskengine.config import load_config
    from taskengine.exceptions import SettingsError

    with pytest.raises(SettingsError) as exc_info:
        load_config()

    assert exc_info.value.field == "verbosity"
    assert exc_info.value.value == "loud"


def test_default_task_with_direct_prefix_rejected(
    clean_env: None, temp_dir: Path, fake_home: Path
) -> None:
    os.chdir(temp_dir)
    (temp_dir / "taskengine.yaml").write_text("default_task: ':build'\n")

    from taskengine.config import load_config
    from taskengine.exceptions import SettingsError

    with pytest.raises(SettingsError) as exc_info:
        load_config()

    assert exc_info.value.field == "default_task"


def test_invalid_yaml_raises_settings_error(
    clean_env: None, temp_dir: Path, fake_home: Path
) -> None:
    os.chdir(temp_dir)
    (temp_dir / "taskengine.yaml").write_text("default_task: [unclosed\n")

    from taskengine.config import load_config
    from taskengine.exceptions import SettingsError

    with pytest.raises(SettingsError, match="Invalid YAML"):
        load_config()


def test_non_mapping_yaml_raises_settings_error(
    clean_env: None, temp_dir: Path, fake_home: Path
) -> None:
    os.chdir(temp_dir)
    (temp_dir / "taskengine.yaml").write_text("- just\n- a list\n")

    from taskengine.config import load_config
    from taskengine.exceptions import SettingsError

    with pytest.raises(SettingsError, match="must contain a mapping"):
        load_config()


def test_empty_yaml_uses_defaults(
    clean_env: None, temp_dir: Path, fake_home: Path
) -> None:
    os.chdir(temp_dir)
    (temp_dir / "taskengine.yaml").write_text("")

    from taskengine.config import load_config

    assert load_config().default_task == "default"


def test_unknown_keys_ignored(
    clean_env: None, temp_dir: Path, fake_home: Path
) -> None:
    """Test that unknown configuration keys are ignored."""
    os.chdir(temp_dir)
    (temp_dir / "taskengine.yaml").write_text(
        "default_task: build\nunknown_section:\n  foo: bar\n"
    )

    from taskengine.config import load_config

    assert load_config().default_task == "build"
