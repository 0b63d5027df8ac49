"""Configuration loading from environment variables and crateroot.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

_CONFIG_FILENAME = "crateroot.toml"
_CONFIG_HOME = Path.home() / ".crateroot"


@dataclass
class RustConfig:
    """User-overridable toolchain paths. Empty means "use the default"."""

    racer_path: str = ""
    rustfmt_path: str = ""
    rustsym_path: str = ""
    rust_lang_src_path: str = ""
    cargo_path: str = ""
    cargo_home_path: str = ""
    rustc_path: str = ""


@dataclass
class ResolverConfig:
    """Root resolution settings."""

    marker: str = "Cargo.toml"
    sysroot_timeout: float = 10.0


@dataclass
class CraterootConfig:
    """Top-level configuration."""

    rust: RustConfig = field(default_factory=RustConfig)
    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    workspace_root: Path = field(default_factory=Path.cwd)
    log_level: str = "INFO"


def _read_file(config_path: Path | None) -> dict:
    if config_path and config_path.exists():
        return tomllib.loads(config_path.read_text())
    for candidate in [Path.cwd() / _CONFIG_FILENAME, _CONFIG_HOME / _CONFIG_FILENAME]:
        if candidate.exists():
            return tomllib.loads(candidate.read_text())
    return {}


def load_config(config_path: Path | None = None) -> CraterootConfig:
    """Load configuration from environment variables and optional crateroot.toml.

    Tool paths are kept as written; fallbacks are applied by ToolPaths.
    For workspace_root and log_level: environment variables > crateroot.toml > defaults.
    """
    file_data = _read_file(config_path)
    rust_data = file_data.get("rust", {})
    resolver_data = file_data.get("resolver", {})

    workspace = os.getenv("CRATEROOT_WORKSPACE") or file_data.get("workspace_root")

    return CraterootConfig(
        rust=RustConfig(
            racer_path=rust_data.get("racer_path", ""),
            rustfmt_path=rust_data.get("rustfmt_path", ""),
            rustsym_path=rust_data.get("rustsym_path", ""),
            rust_lang_src_path=rust_data.get("rust_lang_src_path", ""),
            cargo_path=rust_data.get("cargo_path", ""),
            cargo_home_path=rust_data.get("cargo_home_path", ""),
            rustc_path=rust_data.get("rustc_path", ""),
        ),
        resolver=ResolverConfig(
            marker=resolver_data.get("marker") or "Cargo.toml",
            sysroot_timeout=float(resolver_data.get("sysroot_timeout", 10.0)),
        ),
        workspace_root=Path(workspace).expanduser() if workspace else Path.cwd(),
        log_level=os.getenv("CRATEROOT_LOG_LEVEL", file_data.get("log_level", "INFO")),
    )
