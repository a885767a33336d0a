"""Generate Go argument parsers that read flags from the environment and the command line."""

__version__ = "0.1.0"