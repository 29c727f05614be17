"""Pydantic shape of a declaration document."""

from __future__ import annotations

from pydantic import StrictBool, StrictFloat, StrictInt, StrictStr, TypeAdapter

DeclaredScalar = StrictBool | StrictInt | StrictFloat | StrictStr
DeclaredFields = dict[str, DeclaredScalar | dict[str, DeclaredScalar]]
DeclarationDocument = dict[str, dict[str, DeclaredFields]]

declaration_document_adapter: TypeAdapter[DeclarationDocument] = TypeAdapter(DeclarationDocument)
