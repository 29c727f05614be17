"""Declaration file adapter."""

from __future__ import annotations

from .loader import DECLARATION_GLOB, load_declaration_file, load_declarations

__all__ = ["DECLARATION_GLOB", "load_declaration_file", "load_declarations"]
