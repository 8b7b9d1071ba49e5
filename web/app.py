"""
FastAPI JSON interface for the letter-pair lookup tool
"""

import logging
import os
import threading
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Query

from api.client import SheetClient
from api.models import Category
from lookup.acquisition import AcquisitionController
from lookup.engine import LookupEngine
from lookup.session import LookupSession
from storage.cache import SnapshotCache

load_dotenv('config.env')

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Letter-Pair Lookup",
    description="Look up algorithms for two-letter pairs from the corner and edge sheets",
    version="1.0.0"
)

# Initialize components (lazy loading)
session = None
controller = None
engine = None
_components_lock = threading.RLock()


def get_session() -> LookupSession:
    global session
    with _components_lock:
        if session is None:
            session = LookupSession()
    return session


def get_controller() -> AcquisitionController:
    global controller
    # Requests are served from a thread pool; build and load exactly once
    with _components_lock:
        if controller is None:
            cache = SnapshotCache(os.getenv('CACHE_DB_PATH', './data/lookup.db'))
            built = AcquisitionController(get_session(), SheetClient(), cache)
            built.initial_load()
            controller = built
    return controller


def get_engine(controller: AcquisitionController = Depends(get_controller)) -> LookupEngine:
    global engine
    with _components_lock:
        if engine is None or engine.session is not controller.session:
            engine = LookupEngine(controller.session)
        return engine


def _state(controller: AcquisitionController) -> dict:
    current = controller.session
    return {
        **current.status.to_dict(),
        'active_category': current.active.value,
        'refreshing': current.refreshing,
        'pairs': {category.value: len(current.index_for(category)) for category in Category},
    }


@app.get("/status")
def get_status(controller: AcquisitionController = Depends(get_controller)):
    """Current status line and index sizes"""
    return _state(controller)


@app.get("/lookup/{key}")
def lookup_key(
    key: str,
    category: Optional[str] = Query(None, description="corner or edge (default: active)"),
    engine: LookupEngine = Depends(get_engine)
):
    """Resolve a two-letter pair"""

    try:
        selected = Category.parse(category) if category else None
        result = engine.resolve(key, selected)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if not result.found:
        raise HTTPException(status_code=404, detail=result.status.label)

    return {**result.to_dict(), 'status': result.status.label}


@app.post("/refresh")
def refresh(controller: AcquisitionController = Depends(get_controller)):
    """Fetch both sheets now; falls back to the offline cache on failure"""
    controller.refresh()
    return _state(controller)


@app.post("/category/switch")
def switch_category(controller: AcquisitionController = Depends(get_controller)):
    """Flip between the corner and edge sheets"""
    controller.session.switch_category()
    return _state(controller)


@app.post("/clear")
def clear(controller: AcquisitionController = Depends(get_controller)):
    """Reset the displayed result"""
    controller.session.clear()
    return _state(controller)
