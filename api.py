"""
Minimal FastAPI wrapper for the PE Architecture Scanner.
Endpoints:
  - GET /status (basic health)
  - GET /machine-types (lookup table)
  - POST /detect (upload file; only the leading header bytes are inspected)
  - POST /detect-path (scan local path)
  - POST /scan-dir (directory scan)

Run:
  uvicorn api:app --reload --host 0.0.0.0 --port 8000
"""

from pathlib import Path

from fastapi import FastAPI, UploadFile, File, HTTPException, Form
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from pearch.core.analyzer import ArchitectureScanner
from pearch.core.config import load_config
from pearch.core.detector import DEFAULT_HEADER_SIZE, MACHINE_TYPES, detect_architecture
from pearch.modules import create_default_modules

app = FastAPI(title="PE Architecture Scanner API", version="1.0.0")

origins = ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _get_scanner() -> ArchitectureScanner:
    config = load_config()
    scanner = ArchitectureScanner(config)
    for m in create_default_modules(config):
        scanner.plugin_manager.register_module(m)
    return scanner


@app.get("/status")
def status():
    return {"status": "ok"}


@app.get("/machine-types")
def machine_types():
    return {f"0x{value:04X}": name for value, name in MACHINE_TYPES.items()}


@app.post("/detect")
async def detect_upload(file: UploadFile = File(...)):
    scan_cfg = load_config()["scan"]
    header = await file.read(scan_cfg.get("header_size", DEFAULT_HEADER_SIZE))
    detection = detect_architecture(header, continue_on_invalid=scan_cfg.get("continue_on_invalid", False))
    return {"file_name": file.filename, "header_size": len(header), **detection.to_dict()}


@app.post("/detect-path")
def detect_path(path: str = Form(...)):
    scanner = _get_scanner()
    target = Path(path)
    if not target.exists() or not target.is_file():
        raise HTTPException(status_code=400, detail="Calea nu este un fisier valid")
    res = scanner.scan_file(str(target))
    return JSONResponse(res.to_dict())


@app.post("/scan-dir")
def scan_dir(path: str = Form(...), recursive: bool = Form(True)):
    scanner = _get_scanner()
    directory = Path(path)
    if not directory.is_dir():
        raise HTTPException(status_code=400, detail="Director invalid")
    results = scanner.scan_directory(str(directory), recursive=recursive)
    return {"count": len(results), "results": [r.to_dict() for r in results]}
