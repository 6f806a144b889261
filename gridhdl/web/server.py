"""
FastAPI web server — compile netlists over HTTP.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from gridhdl import __version__
from gridhdl.catalog import catalog_to_dict
from gridhdl.netlist import NetlistError, parse_netlist, validate_netlist
from gridhdl.pipeline.errors import LayoutError
from gridhdl.pipeline.layout import compile_netlist
from gridhdl.pipeline.render import grid_to_text, layout_to_dict


log = logging.getLogger(__name__)

# ── App ────────────────────────────────────────────────────────────

app = FastAPI(title="gridhdl", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Models ─────────────────────────────────────────────────────────

class CompileRequest(BaseModel):
    netlist: dict[str, Any]
    format: Literal["text", "json"] = "json"
    lenient: bool = False


# ── Routes ─────────────────────────────────────────────────────────

@app.get("/api/gates")
async def list_gates():
    return catalog_to_dict()


@app.post("/api/compile")
def compile_endpoint(req: CompileRequest):
    errors = validate_netlist(req.netlist)
    if errors:
        raise HTTPException(422, str(NetlistError(errors)))

    try:
        result = compile_netlist(parse_netlist(req.netlist), strict_unused=not req.lenient)
    except LayoutError as e:
        log.warning("Compile failed: %s", e)
        raise HTTPException(422, str(e)) from e

    if req.format == "text":
        return PlainTextResponse(grid_to_text(result.grid))
    return layout_to_dict(result)


# ── Entry point ────────────────────────────────────────────────────

def main(host: str = "127.0.0.1", port: int = 8000):
    import uvicorn
    uvicorn.run("gridhdl.web.server:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    main()
