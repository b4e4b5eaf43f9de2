"""Terminal library desk: title catalogue, reader register, loans and menus."""

__version__ = "0.1.0"