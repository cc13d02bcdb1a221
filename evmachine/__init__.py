"""A stack-based bytecode virtual machine."""

__version__ = "0.1.0"