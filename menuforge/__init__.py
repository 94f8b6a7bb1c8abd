"""Menu tree projects, key-driven menu navigation and C/C++ menu code generation."""

__version__ = "0.1.0"