__version__ = "0.1.0"

__all__ = [
    "__version__",
    "checks",
    "classfile",
    "cli",
    "config",
    "contracts",
    "core",
    "registration",
    "resolve",
]
