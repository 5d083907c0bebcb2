"""Sheet nesting: pack rectangular parts onto stock sheets."""

__version__ = "1.0.0"
