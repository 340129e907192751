"""
FastAPI backend for Slope Finder.

This provides REST API endpoints for steep climb detection and segment
export. Every request carries its own track file; nothing is kept between
requests.
"""

from fastapi import FastAPI, UploadFile, File, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel
from typing import Dict, List, Optional, Any
import logging
import io
import sys
import os

# Add parent directory to path to import our modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.settings import (
    APP_NAME, APP_VERSION, APP_DESCRIPTION, CORS_ORIGINS, LOGGING_CONFIG,
    MAX_UPLOAD_BYTES, MIN_UPLOAD_BYTES, DEFAULT_SLOPE_THRESHOLD, SLOPE_THRESHOLD_RANGE,
    API_HOST, API_PORT, ClimbConfig, ExportConfig
)

# Initialize logging
logging.basicConfig(level=LOGGING_CONFIG["level"], format=LOGGING_CONFIG["format"])
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=f"{APP_NAME} API",
    description=APP_DESCRIPTION,
    version=APP_VERSION
)

# Add CORS middleware for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# Import our services
from services.climb_analysis_service import analyze_track_file, ClimbAnalysisResult
from core.export import (
    EXPORT_FORMATS, MEDIA_TYPES, default_export_filename, export_file_extension, encode_export
)
from core.validation import ValidationError, SUPPORTED_TRACK_EXTENSIONS, track_file_extension
from utils.geo import format_coordinate


# Pydantic models for API requests/responses
class AnalysisParameters(BaseModel):
    slope_threshold: float = DEFAULT_SLOPE_THRESHOLD
    auto_mode: bool = False


class GradeSummary(BaseModel):
    count: int
    total_gain_m: float


class SegmentResponse(BaseModel):
    id: int
    start_idx: int
    end_idx: int
    start_coordinate: str
    end_coordinate: str
    start_elevation: Optional[float]
    end_elevation: Optional[float]
    distance_m: float
    gain_m: float
    slope_percent: float
    grade: str
    point_count: int


class TrackAnalysisResponse(BaseModel):
    segments: List[SegmentResponse]
    segment_count: int
    slope_threshold: float
    auto_mode: bool
    grade_summary: Dict[str, GradeSummary]
    distribution: Dict[str, Any]
    track_summary: Dict[str, Any]


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "message": f"{APP_NAME} API",
        "version": APP_VERSION,
        "endpoints": {
            "POST /api/analyze-track": "Find steep climbs in a GPX or KML track",
            "POST /api/export/{format}": "Export steep climbs as gpx, kml or merged-kml",
            "GET /api/config": "Default parameters",
            "GET /api/health": "Health check endpoint"
        }
    }


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "slope-finder-api"}


@app.get("/api/config")
async def get_config():
    """Get default configuration values."""
    return {
        "defaults": ClimbConfig.as_dict(),
        "ranges": {
            "slope_threshold": SLOPE_THRESHOLD_RANGE
        },
        "export": ExportConfig.as_dict()
    }


async def _run_analysis(file: UploadFile, params: AnalysisParameters) -> ClimbAnalysisResult:
    """Read an upload and analyze it, mapping failures to HTTP errors."""
    if not file.filename or track_file_extension(file.filename) not in SUPPORTED_TRACK_EXTENSIONS:
        raise HTTPException(status_code=400, detail="Only GPX and KML files are allowed")

    content = await file.read()

    if len(content) > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size is {MAX_UPLOAD_BYTES // 1024 // 1024}MB, "
                   f"received {len(content) / 1024 / 1024:.1f}MB"
        )

    if len(content) < MIN_UPLOAD_BYTES:
        raise HTTPException(status_code=400, detail="File appears to be empty or corrupted")

    logger.info(f"Processing file: {file.filename}")
    try:
        return analyze_track_file(
            io.BytesIO(content),
            slope_threshold=params.slope_threshold,
            auto_mode=params.auto_mode,
            filename=file.filename
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _segment_response(index: int, segment) -> SegmentResponse:
    return SegmentResponse(
        id=index,
        start_idx=segment.start_idx,
        end_idx=segment.end_idx,
        start_coordinate=format_coordinate(segment.start.longitude, segment.start.latitude),
        end_coordinate=format_coordinate(segment.end.longitude, segment.end.latitude),
        start_elevation=segment.start.elevation,
        end_elevation=segment.end.elevation,
        distance_m=segment.distance_m,
        gain_m=segment.gain_m,
        slope_percent=segment.slope_percent,
        grade=segment.grade.value,
        point_count=segment.point_count
    )


@app.post("/api/analyze-track", response_model=TrackAnalysisResponse)
async def analyze_track(
    file: UploadFile = File(...),
    slope_threshold: float = DEFAULT_SLOPE_THRESHOLD,
    auto_mode: bool = False
):
    """
    Find steep climbs in a track file.

    Args:
        file: GPX or KML file to analyze
        slope_threshold: Slope in percent that segments must exceed
        auto_mode: Ignore slope_threshold and use the automatic threshold

    Returns:
        Segments with grades, per-grade summary and track statistics
    """
    try:
        result = await _run_analysis(
            file, AnalysisParameters(slope_threshold=slope_threshold, auto_mode=auto_mode)
        )

        return TrackAnalysisResponse(
            segments=[_segment_response(i, s) for i, s in enumerate(result.segments)],
            segment_count=result.segment_count,
            slope_threshold=result.slope_threshold,
            auto_mode=result.auto_mode,
            grade_summary={
                grade: GradeSummary(**values) for grade, values in result.grade_summary.items()
            },
            distribution=result.distribution,
            track_summary={**result.track_summary, 'filename': file.filename}
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error analyzing track: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error analyzing track: {str(e)}")


@app.post("/api/export/{export_format}")
async def export_track(
    export_format: str,
    file: UploadFile = File(...),
    slope_threshold: float = DEFAULT_SLOPE_THRESHOLD,
    auto_mode: bool = False
):
    """
    Analyze a track file and download the steep climbs.

    Args:
        export_format: One of gpx, kml, merged-kml
        file: GPX or KML file to analyze
        slope_threshold: Slope in percent that segments must exceed
        auto_mode: Ignore slope_threshold and use the automatic threshold

    Returns:
        The export document as an attachment
    """
    if export_format not in EXPORT_FORMATS:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown export format {export_format}, expected one of {list(EXPORT_FORMATS)}"
        )

    try:
        result = await _run_analysis(
            file, AnalysisParameters(slope_threshold=slope_threshold, auto_mode=auto_mode)
        )
        document = result.export(export_format)

    except HTTPException:
        raise
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error exporting track: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error exporting track: {str(e)}")

    extension = export_file_extension(export_format)
    filename = default_export_filename(extension)
    return Response(
        content=encode_export(document),
        media_type=f"{MEDIA_TYPES[extension]};charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=API_HOST, port=API_PORT)
