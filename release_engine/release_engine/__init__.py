"""Release-impact analysis for graphs of Maven projects."""

__version__ = "0.4.0"
