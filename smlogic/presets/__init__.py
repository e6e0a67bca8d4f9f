"""Ready-made schemes built on the combiner."""

from smlogic.presets.registry import get_registry, load_presets, preset

__all__ = ["get_registry", "load_presets", "preset"]
