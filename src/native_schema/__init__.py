"""Native module schema — TypeScript module specs to a language-neutral IR."""

__version__ = "0.1.0"
