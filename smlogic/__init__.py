"""smlogic: compose logic schemes and compile them into Scrap Mechanic blueprints."""

__version__ = "0.1.0"
