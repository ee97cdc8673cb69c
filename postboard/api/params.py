"""Shared request parameter dependencies."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import Path

from postboard.core.extract import Source
from postboard.core.extract import extract
from postboard.schemas.common import IdInput


def id_path(id: Annotated[str, Path(description="The resource id, a UUID.")]) -> UUID:
    """Parse the ``{id}`` path segment through the extraction pipeline."""
    return extract(IdInput, {"id": id}, Source.PATH).id
