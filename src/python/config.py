"""Taichi backend configuration.

Selects the compute backend for the tuple kernels and initializes Taichi
with float64 as the default floating-point type, so kernel arithmetic
matches the float64 host-side Tuple.

Settings can come from code or from the environment:
    RAYTRACER_ARCH   Backend name: cpu, gpu, cuda, vulkan, metal (default: cpu)
    RAYTRACER_DEBUG  Enable Taichi debug mode when set to 1/true/yes

Example:
    >>> from src.python.config import BackendConfig, init_backend
    >>> init_backend(BackendConfig(arch="cpu"))
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import taichi as ti

logger = logging.getLogger(__name__)

_ARCHS: dict[str, Any] = {
    "cpu": ti.cpu,
    "gpu": ti.gpu,
    "cuda": ti.cuda,
    "vulkan": ti.vulkan,
    "metal": ti.metal,
}

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class BackendConfig:
    """Taichi initialization settings.

    Attributes:
        arch: Backend name, one of the keys accepted by resolve_arch().
        debug: Enable Taichi's debug mode (bounds checks, slower).
    """

    arch: str = "cpu"
    debug: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BackendConfig:
        """Build a config from RAYTRACER_* environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            A BackendConfig with unset variables left at their defaults.
        """
        env = os.environ if environ is None else environ
        config = cls()

        arch = env.get("RAYTRACER_ARCH")
        if arch:
            config.arch = arch.strip().lower()

        debug = env.get("RAYTRACER_DEBUG")
        if debug:
            config.debug = debug.strip().lower() in _TRUE_VALUES

        return config


def resolve_arch(name: str) -> Any:
    """Map a backend name to a Taichi arch.

    Args:
        name: Case-insensitive backend name.

    Returns:
        The matching Taichi arch object.

    Raises:
        ValueError: If the name is not a known backend.
    """
    key = name.strip().lower()
    if key not in _ARCHS:
        raise ValueError(f"Unknown Taichi arch: {name}. Expected one of {sorted(_ARCHS)}")
    return _ARCHS[key]


def init_backend(config: BackendConfig | None = None) -> BackendConfig:
    """Initialize Taichi for the tuple kernels.

    Args:
        config: Settings to use. Defaults to BackendConfig.from_env().

    Returns:
        The config that was applied.
    """
    if config is None:
        config = BackendConfig.from_env()

    arch = resolve_arch(config.arch)
    logger.info(
        "Initializing Taichi (arch=%s, debug=%s)",
        config.arch,
        config.debug,
    )
    ti.init(
        arch=arch,
        default_fp=ti.f64,
        debug=config.debug,
    )
    return config
