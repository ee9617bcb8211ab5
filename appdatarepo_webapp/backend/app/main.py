"""FastAPI app: parse appdata documents and ingest metadata directories for the frontend."""

from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from appdatarepo import AppdataParseError, ingest_directory, parse_appdata

app = FastAPI(
    title="appdatarepo API",
    description="AppData/AppStream metadata to package records",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.post("/api/parse")
async def post_parse(
    request: Request,
    filename: str | None = Query(None, description="Document name used for the appdata link"),
) -> JSONResponse:
    """Parse the appdata document in the request body into records."""
    body = await request.body()
    try:
        records = parse_appdata(body, filename=filename)
    except AppdataParseError as e:
        return JSONResponse(status_code=422, content=e.to_dict())
    return JSONResponse(content={"records": [r.to_dict() for r in records]})


@app.get("/api/directory")
def get_directory(path: str = Query(..., description="Metadata directory to ingest")) -> dict:
    """Ingest every appdata file of a directory; per-file failures are listed in errors."""
    if not Path(path).is_dir():
        raise HTTPException(status_code=404, detail=f"Directory not found: {path}")
    store, result = ingest_directory(path)
    return {
        "records": [store.record(h).to_dict() for h in result.handles if h in store],
        "errors": [e.to_dict() for e in result.errors],
    }
