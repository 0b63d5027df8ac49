"""Toolchain paths — configured values with environment and literal fallbacks."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Mapping

from crateroot.config import RustConfig
from crateroot.errors import ExternalProcessFailed, SysrootTimeout

logger = logging.getLogger(__name__)


class ToolPaths:
    """Read-only view of the toolchain: configuration > environment > default."""

    def __init__(
        self,
        config: RustConfig,
        *,
        env: Mapping[str, str] | None = None,
        sysroot_timeout: float = 10.0,
    ) -> None:
        self.config = config
        self.env = os.environ if env is None else env
        self.sysroot_timeout = sysroot_timeout

    @property
    def racer(self) -> str:
        return self.config.racer_path or "racer"

    @property
    def rustfmt(self) -> str:
        return self.config.rustfmt_path or "rustfmt"

    @property
    def rustsym(self) -> str:
        return self.config.rustsym_path or "rustsym"

    @property
    def rust_lang_src(self) -> str:
        return self.config.rust_lang_src_path or self.env.get("RUST_SRC_PATH", "")

    @property
    def cargo(self) -> str:
        return self.config.cargo_path or "cargo"

    @property
    def cargo_home(self) -> str:
        return self.config.cargo_home_path or self.env.get("CARGO_HOME", "")

    @property
    def rustc(self) -> str:
        return self.config.rustc_path or "rustc"

    def as_dict(self) -> dict[str, str]:
        return {
            "racer": self.racer,
            "rustfmt": self.rustfmt,
            "rustsym": self.rustsym,
            "rust_lang_src": self.rust_lang_src,
            "cargo": self.cargo,
            "cargo_home": self.cargo_home,
            "rustc": self.rustc,
        }

    async def rustc_sysroot(self, cwd: str | None = None) -> str:
        """Run `rustc --print sysroot` and return its trimmed stdout. No retry."""
        cmd = [self.rustc, "--print", "sysroot"]
        logger.debug("Running: %s", " ".join(cmd))

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd or os.getcwd(),
            )
        except OSError as e:
            logger.error("Failed to start %s: %s", cmd[0], e)
            raise ExternalProcessFailed(cmd, f"could not be started ({e})") from e

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self.sysroot_timeout
            )
        except asyncio.TimeoutError:
            logger.error("%s timed out after %gs, killing", cmd[0], self.sysroot_timeout)
            process.kill()
            await process.wait()
            raise SysrootTimeout(cmd, self.sysroot_timeout) from None

        if process.returncode != 0:
            message = stderr.decode(errors="replace").strip() or "unknown error"
            logger.error("%s exited with rc=%d: %s", cmd[0], process.returncode, message)
            raise ExternalProcessFailed(cmd, message, returncode=process.returncode)

        return stdout.decode(errors="replace").strip()
