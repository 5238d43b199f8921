"""fsgate - sandboxed line-range read and append gateway."""

__version__ = "0.1.0"
