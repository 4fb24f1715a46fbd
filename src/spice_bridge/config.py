"""Configuration management and first-run setup for spice-bridge.

Stores user preferences in ~/.config/spice-bridge/config.toml.
The CLI prompts for the content root on first use; library callers can
build a :class:`Config` directly and pass it to :func:`apply_config`.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path

DEFAULT_CONTENT_ROOT = "~/.local/share/spice-bridge/content"
DEFAULT_KERNEL_DIR = "NonAssetData/kernels"
DEFAULT_ERROR_ACTION = "RETURN"
DEFAULT_LOG_LEVEL = "WARNING"

CONFIG_DIR = Path("~/.config/spice-bridge").expanduser()
CONFIG_FILE = CONFIG_DIR / "config.toml"


@dataclass
class Config:
    """User configuration for spice-bridge."""

    content_root: str = DEFAULT_CONTENT_ROOT
    kernel_dir: str = DEFAULT_KERNEL_DIR
    error_action: str = DEFAULT_ERROR_ACTION
    log_level: str = DEFAULT_LOG_LEVEL


def load_config() -> Config | None:
    """Load config from TOML file. Returns None if not configured yet."""
    if not CONFIG_FILE.is_file():
        return None
    with open(CONFIG_FILE, "rb") as f:
        data = tomllib.load(f)
    content = data.get("content", {})
    return Config(
        content_root=content.get("root", DEFAULT_CONTENT_ROOT),
        kernel_dir=content.get("kernel_dir", DEFAULT_KERNEL_DIR),
        error_action=data.get("errors", {}).get("action", DEFAULT_ERROR_ACTION),
        log_level=data.get("logging", {}).get("level", DEFAULT_LOG_LEVEL),
    )


def save_config(config: Config) -> None:
    """Write config to TOML file."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    text = (
        "# spice-bridge configuration\n"
        "\n"
        "[content]\n"
        f'root = "{config.content_root}"\n'
        f'kernel_dir = "{config.kernel_dir}"\n'
        "\n"
        "[errors]\n"
        f'action = "{config.error_action}"\n'
        "\n"
        "[logging]\n"
        f'level = "{config.log_level}"\n'
    )
    CONFIG_FILE.write_text(text)


def setup_interactive() -> Config:
    """Run first-time interactive setup.

    Prompts for the content root and the kernel directory below it,
    creates the directories, saves config.
    """
    print("spice-bridge: First-time setup\n")

    content_root = input(f"  Content root [{DEFAULT_CONTENT_ROOT}]: ").strip()
    if not content_root:
        content_root = DEFAULT_CONTENT_ROOT

    kernel_dir = input(
        f"  Kernel directory (relative to content root) [{DEFAULT_KERNEL_DIR}]: "
    ).strip()
    if not kernel_dir:
        kernel_dir = DEFAULT_KERNEL_DIR

    (Path(content_root).expanduser() / kernel_dir).mkdir(
        parents=True, exist_ok=True,
    )

    config = Config(content_root=content_root, kernel_dir=kernel_dir)
    save_config(config)
    print(f"\n  Config saved to {CONFIG_FILE}")
    return config


def show_config(config: Config) -> None:
    """Print current configuration."""
    print(f"\nspice-bridge configuration\n")
    print(f"  Config file:   {CONFIG_FILE}")
    print(f"  Content root:  {config.content_root}")
    print(f"  Kernel dir:    {config.kernel_dir}")
    print(f"  Error action:  {config.error_action}")
    print(f"  Log level:     {config.log_level}")
    print()


def ensure_config() -> Config:
    """Load config or run interactive setup if first time."""
    config = load_config()
    if config is None:
        config = setup_interactive()
    return config


def apply_config(config: Config) -> None:
    """Install *config*: content root, CSPICE error action, log level."""
    from spice_bridge.errors import set_erract
    from spice_bridge.kernels import set_content_root

    logging.getLogger("spice_bridge").setLevel(config.log_level.upper())
    set_content_root(config.content_root)
    set_erract(config.error_action)
