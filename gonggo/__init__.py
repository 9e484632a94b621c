"""Request broker core: configuration, request tables, response store, client replies and proxy worker bookkeeping."""

__version__ = "0.1.0"