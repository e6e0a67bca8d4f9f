"""Constants of the target blueprint format and of the path grammar."""

from smlogic.utils.geometry import PATH_SEPARATOR

# Hard limit of outgoing connections a single logic part can hold in game.
MAX_CONNECTIONS = 255

# Slot name used when a path omits it, and the name of a leaf unit's own slots.
DEFAULT_SLOT = "_"

# Kind tag of the default slots created for a single leaf unit.
DEFAULT_SLOT_KIND = "shape"

# Reserved sector name addressing the whole slot.
WHOLE_SLOT_SECTOR = ""

TICKS_PER_SECOND = 40

__all__ = [
    "PATH_SEPARATOR",
    "MAX_CONNECTIONS",
    "DEFAULT_SLOT",
    "DEFAULT_SLOT_KIND",
    "WHOLE_SLOT_SECTOR",
    "TICKS_PER_SECOND",
]
