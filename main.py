import argparse
import logging
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

import sys
from pathlib import Path

# Add project root to path for package imports
base_dir = Path(__file__).parent
sys.path.insert(0, str(base_dir))

from db import database
from db.bulk import reseed_from_json
from db.database import StoreNotInitializedError, init_db, get_conn, get_index_status
from db.diagnostics import check_index_sync, rebuild_search_index
from config import load_config
from routes import sentences, admin  # Import routers

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)

def start_store() -> dict:
    """Load config, point the store at its file and initialize it. Fatal on failure."""
    config = load_config()
    configure_logging(config["logging"]["level"])
    database.configure(config["database"]["path"])
    if not init_db(config["seed"]["path"]):
        logger.critical("Refusing to start without a usable sentence store")
        raise RuntimeError(f"Sentence store could not be initialized at {config['database']['path']}")
    return config

# First-run init
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: init DB and config
    start_store()
    yield
    # Shutdown if needed

app = FastAPI(title="TypingZone", description="Local sentence store for typing practice", lifespan=lifespan)

# Include routers
app.include_router(sentences.router, prefix="/sentences", tags=["sentences"])
app.include_router(admin.router, prefix="/admin", tags=["admin"])

@app.exception_handler(StoreNotInitializedError)
async def store_not_initialized(request: Request, exc: StoreNotInitializedError):
    return JSONResponse(status_code=503, content={"detail": str(exc)})

@app.get("/health")
async def health():
    return {"ready": database.is_ready()}

def run_maintenance(args: argparse.Namespace) -> int:
    config = start_store()
    with get_conn() as conn:
        if args.reseed:
            inserted = reseed_from_json(conn, config["seed"]["path"])
            print(f"Reseeded {inserted} sentences")
        if args.rebuild_index:
            count = rebuild_search_index(conn)
            print(f"Search index rebuilt, {count} sentences in total")
        if args.check_index:
            status = get_index_status(conn)
            synced = check_index_sync(conn)
            print(f"Index status: {status}; live sync test: {'SUCCESS' if synced else 'FAILED'}")
            if not status["in_sync"] or not synced:
                return 1
    return 0

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="TypingZone sentence store")
    parser.add_argument("--init", action="store_true", help="Initialize DB and config")
    parser.add_argument("--dev", action="store_true", help="Run in dev mode with reload")
    parser.add_argument("--reseed", action="store_true", help="Re-apply the seed file")
    parser.add_argument("--rebuild-index", action="store_true", help="Drop and rebuild the search index")
    parser.add_argument("--check-index", action="store_true", help="Check search index consistency")
    parser.add_argument("--port", type=int, default=8000, help="Port to serve on")
    args = parser.parse_args()
    if args.init:
        start_store()
        print("DB initialized and config copied to ~/.typingzone/")
        sys.exit(0)
    if args.reseed or args.rebuild_index or args.check_index:
        sys.exit(run_maintenance(args))
    # Run server
    uvicorn.run("main:app", host="127.0.0.1", port=args.port, reload=args.dev, log_level="info")
