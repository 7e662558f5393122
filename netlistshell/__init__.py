"""Command shell, parser and layout geometry for structural Verilog netlists."""

__version__ = "0.1.0"
__all__ = ["__version__"]