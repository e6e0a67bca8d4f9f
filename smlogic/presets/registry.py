"""Preset registry: every ready-made scheme is a function registered via decorator.

Usage:
    @preset(name="adder", params={"word_size": 8}, description="Ripple-carry adder")
    def adder(word_size: int) -> Scheme:
        ...

Adding a new preset = writing one decorated function in a module of this
package. ``load_presets`` imports every module so the decorators fire.
"""

from __future__ import annotations

import importlib
import logging
import pkgutil
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from smlogic.engine.combiner import Combiner
from smlogic.engine.scheme import Scheme

logger = logging.getLogger(__name__)

_TRUE_WORDS = {"1", "true", "yes", "on"}
_FALSE_WORDS = {"0", "false", "no", "off"}


def _coerce_param(name: str, value: Any, default: Any) -> Any:
    """Convert a command line string to the type of the parameter's default."""
    if not isinstance(value, str) or isinstance(default, str):
        return value
    if isinstance(default, bool):
        lowered = value.lower()
        if lowered in _TRUE_WORDS:
            return True
        if lowered in _FALSE_WORDS:
            return False
        raise ValueError(f"Parameter {name!r} expects a boolean, got {value!r}")
    try:
        return type(default)(value)
    except ValueError:
        raise ValueError(
            f"Parameter {name!r} expects {type(default).__name__}, got {value!r}"
        ) from None


@dataclass
class PresetSpec:
    name: str
    fn: Callable[..., Scheme]
    # parameter name -> default value, also fixes the parameter's type
    params: dict[str, Any] = field(default_factory=dict)
    description: str = ""

    def build(self, **overrides: Any) -> Scheme:
        unknown = set(overrides) - set(self.params)
        if unknown:
            raise ValueError(f"Preset {self.name!r} has no parameter(s) {sorted(unknown)}")
        kwargs = {
            key: _coerce_param(key, overrides[key], default) if key in overrides else default
            for key, default in self.params.items()
        }
        return self.fn(**kwargs)


class PresetRegistry:
    """Singleton registry of all presets."""

    def __init__(self) -> None:
        self._presets: dict[str, PresetSpec] = {}

    def register(self, spec: PresetSpec) -> None:
        if spec.name in self._presets:
            raise ValueError(f"Duplicate preset name: {spec.name}")
        self._presets[spec.name] = spec
        logger.debug("Registered preset %s", spec.name)

    def get(self, name: str) -> PresetSpec:
        return self._presets[name]

    def all(self) -> list[PresetSpec]:
        return sorted(self._presets.values(), key=lambda s: s.name)

    @property
    def count(self) -> int:
        return len(self._presets)


# Module-level singleton
_registry = PresetRegistry()


def get_registry() -> PresetRegistry:
    return _registry


def preset(
    *,
    name: str,
    params: dict[str, Any] | None = None,
    description: str = "",
):
    """Decorator to register a preset function."""

    def decorator(fn: Callable[..., Scheme]):
        _registry.register(
            PresetSpec(name=name, fn=fn, params=params or {}, description=description)
        )
        return fn

    return decorator


def load_presets() -> PresetRegistry:
    """Import all preset modules so @preset decorators fire."""
    package = importlib.import_module("smlogic.presets")
    for _, module_name, _ in pkgutil.iter_modules(package.__path__):
        if module_name != "registry":
            importlib.import_module(f"smlogic.presets.{module_name}")
    return _registry


def compile_logged(combiner: Combiner, what: str) -> Scheme:
    """Compile and report every unresolved reference as a warning."""
    scheme, invalid = combiner.compile()
    for line in invalid.describe():
        logger.warning("%s: %s", what, line)
    return scheme
