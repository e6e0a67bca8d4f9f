"""Compiler configuration: controls the post-wiring soundness checks."""

from __future__ import annotations

from dataclasses import dataclass

from smlogic.engine.constants import MAX_CONNECTIONS


@dataclass
class CompileConfig:
    """Knobs consumed by ``Combiner.compile``."""

    # Outgoing connections allowed per unit before compilation fails
    max_connections: int = MAX_CONNECTIONS
    # Disable to emit blueprints the game will truncate on load
    check_connections_overflow: bool = True


# Module-level default used by combiners created without an explicit config
_default_config = CompileConfig()


def get_default_config() -> CompileConfig:
    return _default_config


def set_default_config(config: CompileConfig) -> None:
    global _default_config
    _default_config = config
