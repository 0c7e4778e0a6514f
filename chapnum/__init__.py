"""chapnum - chapter numbers for TOC-driven Markdown documentation sets."""

__version__ = "0.1.0"
