"""fugo: find and safely remove Go toolchain installations."""

__version__ = "0.3.0"
