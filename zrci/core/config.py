"""Typed configuration loading and access.

Configuration lives in an optional ``zrci.toml`` at the project root and is
scoped to one pipeline run. Every value has a default matching the zr
release workflow, so a project without the file behaves like upstream CI.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, cast

from zrci.platform.detection import Platform

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_table

__all__ = [
    "Config",
    "ConfigError",
    "ColorMode",
    "EnvConfig",
    "PipelineConfig",
    "PublishConfig",
    "load_config",
    "load_config_or_default",
    "DEFAULT_TAG_PREFIX",
    "DEFAULT_STATIC_BUILD_TARGET",
    "DEFAULT_BENCH_ARCHIVE",
    "DEFAULT_TOKEN_ENV",
]

DEFAULT_TAG_PREFIX = "refs/tags/"
DEFAULT_STATIC_BUILD_TARGET = "x86_64-unknown-linux-musl"
DEFAULT_BENCH_ARCHIVE = "target/bench.tar.gz"
DEFAULT_TOKEN_ENV = "GITHUB_TOKEN"

ColorMode = Literal["always", "never", "auto"]
_COLOR_MODES: tuple[ColorMode, ...] = ("always", "never", "auto")


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    """Gate and artifact locations.

    ``out_dir`` and ``bench_archive`` are relative to the project root.
    """

    tag_prefix: str = DEFAULT_TAG_PREFIX
    lint_platform: Platform = Platform.LINUX
    out_dir: str = "."
    bench_archive: str = DEFAULT_BENCH_ARCHIVE


@dataclass(frozen=True, slots=True)
class EnvConfig:
    """Process-wide build environment."""

    color: ColorMode = "always"
    static_build_target: str = DEFAULT_STATIC_BUILD_TARGET

    def as_env(self) -> dict[str, str]:
        """Environment variables exported to every build backend call."""
        return {
            "CARGO_TERM_COLOR": self.color,
            "STATIC_BUILD_TARGET": self.static_build_target,
        }


@dataclass(frozen=True, slots=True)
class PublishConfig:
    """Release record settings.

    ``repo`` is an ``owner/name`` slug; None lets gh infer it from the checkout.
    ``token_env`` names the environment variable holding the credential.
    """

    repo: str | None = None
    token_env: str = DEFAULT_TOKEN_ENV


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    env: EnvConfig = field(default_factory=EnvConfig)
    publish: PublishConfig = field(default_factory=PublishConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML).

        Raises:
            ValueError: On an unknown lint platform or color mode.
        """
        pipeline: StrDict = get_table(data, "pipeline") or {}
        env: StrDict = get_table(data, "env") or {}
        publish: StrDict = get_table(data, "publish") or {}

        lint_name = get_str(pipeline, "lint_platform")
        lint_platform = Platform.parse(lint_name) if lint_name else Platform.LINUX

        color = get_str(env, "color") or "always"
        if color not in _COLOR_MODES:
            raise ValueError(f"env.color must be one of {', '.join(_COLOR_MODES)}: {color!r}")

        return cls(
            pipeline=PipelineConfig(
                tag_prefix=get_str(pipeline, "tag_prefix") or DEFAULT_TAG_PREFIX,
                lint_platform=lint_platform,
                out_dir=get_str(pipeline, "out_dir") or ".",
                bench_archive=get_str(pipeline, "bench_archive") or DEFAULT_BENCH_ARCHIVE,
            ),
            env=EnvConfig(
                color=cast(ColorMode, color),
                static_build_target=get_str(env, "static_build_target")
                or DEFAULT_STATIC_BUILD_TARGET,
            ),
            publish=PublishConfig(
                repo=get_str(publish, "repo"),
                token_env=get_str(publish, "token_env") or DEFAULT_TOKEN_ENV,
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to zrci.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config from file, or the default config if the file doesn't exist.

    A file that exists but is invalid is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
