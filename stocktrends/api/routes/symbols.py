"""Symbol autocomplete endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from stocktrends.api.deps import get_symbol_directory
from stocktrends.symbols import SymbolDirectory

router = APIRouter(tags=["symbols"])


@router.get("/symbols")
async def search_symbols(
    q: str = "",
    limit: int = Query(10, ge=1, le=50),
    directory: SymbolDirectory = Depends(get_symbol_directory),
):
    return [entry.to_dict() for entry in directory.search(q, limit=limit)]
