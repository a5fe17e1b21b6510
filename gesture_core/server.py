#!/usr/bin/env python3
"""
Gesture Feedback - FastAPI service around the gesture pipeline.

Clients push landmark frames (from a browser or any other landmark source)
and read back stabilized gestures, the live pose and the template library.
"""

import os
import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from dotenv import load_dotenv

from .config import Cfg, load_config
from .errors import AuthoringError
from .pipeline import GesturePipeline
from .types import DetectionMode, ExternalGesture, FrameInput, GestureEvent

logger = logging.getLogger(__name__)


# Request/Response models
class LandmarkModel(BaseModel):
    x: float
    y: float
    z: Optional[float] = None


class ExternalGestureModel(BaseModel):
    name: str
    score: float = Field(allow_inf_nan=False)


class FrameRequest(BaseModel):
    timestamp_ms: float = Field(allow_inf_nan=False)
    hand_landmarks: Optional[List[LandmarkModel]] = None
    external_gesture: Optional[ExternalGestureModel] = None
    blendshapes: Optional[Dict[str, float]] = None


class GestureEventModel(BaseModel):
    name: str
    confidence: float
    timestamp: float
    source: str


class FrameResponse(BaseModel):
    event: Optional[GestureEventModel] = None
    current: Optional[GestureEventModel] = None


class CaptureRequest(BaseModel):
    name: str


class ModeRequest(BaseModel):
    mode: str


def _event_model(event: Optional[GestureEvent]) -> Optional[GestureEventModel]:
    if event is None:
        return None
    return GestureEventModel(
        name=event.name,
        confidence=event.confidence,
        timestamp=event.timestamp,
        source=event.source,
    )


def create_app(pipeline: Optional[GesturePipeline] = None, cfg: Optional[Cfg] = None) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        pipeline: pipeline to serve; one is built from `cfg` when None
        cfg: configuration used when building the pipeline
    """
    if pipeline is None:
        pipeline = GesturePipeline(cfg)

    app = FastAPI(
        title="Gesture Feedback API",
        description="Hand gesture and facial expression classification from landmark frames",
        version="0.1.0",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.pipeline = pipeline

    @app.get("/")
    async def root():
        """Health check endpoint"""
        return {
            "status": "online",
            "service": "Gesture Feedback",
            "mode": pipeline.mode.value,
            "templates": len(pipeline.library),
        }

    @app.post("/frames", response_model=FrameResponse)
    async def submit_frame(request: FrameRequest):
        """Run one landmark frame through the pipeline"""
        landmarks = None
        if request.hand_landmarks is not None:
            landmarks = [lm.model_dump() for lm in request.hand_landmarks]
        external = None
        if request.external_gesture is not None:
            external = ExternalGesture(name=request.external_gesture.name,
                                       score=request.external_gesture.score)

        event = pipeline.process(FrameInput(
            timestamp_ms=request.timestamp_ms,
            hand_landmarks=landmarks,
            external_gesture=external,
            blendshapes=request.blendshapes,
        ))
        return FrameResponse(event=_event_model(event), current=_event_model(pipeline.current_gesture))

    @app.get("/gesture")
    async def get_gesture():
        """Currently active gesture"""
        return {"gesture": _event_model(pipeline.current_gesture)}

    @app.get("/pose")
    async def get_pose():
        """Latest per-finger curl/direction labels"""
        rows = pipeline.pose_snapshot()
        return {
            "detected": bool(rows),
            "fingers": [
                {"finger": finger, "curl": curl, "direction": direction}
                for finger, curl, direction in rows
            ],
        }

    @app.get("/templates")
    async def list_templates():
        """All templates in declaration order"""
        return {"templates": [t.to_dict() for t in pipeline.library.templates()]}

    @app.post("/templates", status_code=201)
    async def capture_template(request: CaptureRequest):
        """Capture the latest pose as a new template"""
        try:
            template = pipeline.capture(request.name)
        except AuthoringError as e:
            status = 409 if e.reason == "no_pose" else 422
            raise HTTPException(status_code=status, detail=str(e))
        return template.to_dict()

    @app.delete("/templates/{name}")
    async def delete_template(name: str):
        """Remove every template with this name"""
        removed = pipeline.library.remove(name)
        if not removed:
            raise HTTPException(status_code=404, detail=f"No template named '{name}'")
        return {"removed": removed}

    @app.put("/mode")
    async def set_mode(request: ModeRequest):
        """Switch detection mode (hands, face, both)"""
        try:
            mode = pipeline.set_mode(request.mode)
        except ValueError:
            valid = ", ".join(m.value for m in DetectionMode)
            raise HTTPException(status_code=422, detail=f"Unknown mode '{request.mode}'; expected one of: {valid}")
        return {"mode": mode.value}

    return app


def main():
    import uvicorn

    # Load environment variables
    load_dotenv()
    cfg = load_config(os.getenv("GESTURE_CONFIG"))

    logging.basicConfig(level=getattr(logging, cfg.logging.level.upper(), logging.INFO))
    logger.info(f"🚀 Starting Gesture Feedback server on http://{cfg.server.host}:{cfg.server.port}")
    logger.info(f"📚 API documentation available at http://localhost:{cfg.server.port}/docs")

    uvicorn.run(
        create_app(cfg=cfg),
        host=cfg.server.host,
        port=cfg.server.port,
        reload=False,
        log_level=cfg.logging.level.lower()
    )


if __name__ == "__main__":
    main()
