"""canonlint — Canon compliance engine for component-library templates."""

__version__ = "0.4.0"
