"""ccgen: prompt-to-file code generation over interchangeable Claude backends."""

__version__ = "0.1.0"
