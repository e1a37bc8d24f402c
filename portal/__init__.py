"""Notion-backed support portal core: discovery, schema validation and record marshalling."""

__version__ = "0.1.0"
