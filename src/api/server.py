"""
Infant Growth Percentiles — FastAPI Backend
===========================================

WHO Child Growth Standards percentile engine (LMS method), 0–24 months.

REST API endpoints:
    GET    /percentile                              Percentile of one measurement
    GET    /who/percentile-lines                    WHO reference percentile lines
    POST   /infants                                 Create infant profile
    GET    /infants                                 List all infants
    GET    /infants/{id}                            Get infant profile + measurements
    PUT    /infants/{id}                            Update profile, recompute percentiles
    POST   /infants/{id}/measurements               Record (or replace) a measurement
    DELETE /infants/{id}/measurements/{mid}         Delete a measurement
    GET    /infants/{id}/chart                      Percentile lines + infant's points
    GET    /health                                  Health check
"""
import sys
import math
from pathlib import Path
from datetime import date
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from pydantic import BaseModel, Field
from typing import Optional, List
import secrets

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import AUTH_ENABLED, AUTH_USERNAME, AUTH_PASSWORD
from config import settings
from config.settings import DEBUG, HOST, PORT, VERSION
from config.settings import (
    WEIGHT_KG_MIN, WEIGHT_KG_MAX, HEIGHT_CM_MIN, HEIGHT_CM_MAX,
    HEAD_CM_MIN, HEAD_CM_MAX,
)
from src.models.who_engine import WHOPercentileEngine
from src.models.data_structures import InfantProfile, percentile_band
from src.models.chart_data import build_percentile_lines, measurement_points
from src.utils.dates import is_valid_measurement_date

TYPE_PATTERN = "^(weight|height|head)$"
SEX_PATTERN = "^(male|female)$"

# ── Auth ─────────────────────────────────────────────────────────
security = HTTPBasic()

def verify_credentials(credentials: HTTPBasicCredentials = Depends(security)):
    """HTTP Basic Auth — only enforced when AUTH_ENABLED=true."""
    if not AUTH_ENABLED:
        return True
    correct_user = secrets.compare_digest(credentials.username, AUTH_USERNAME)
    correct_pass = secrets.compare_digest(credentials.password, AUTH_PASSWORD)
    if not (correct_user and correct_pass):
        raise HTTPException(
            status_code=401,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )
    return True

# ── Global State ──────────────────────────────────────────────

_engine = WHOPercentileEngine()
_infants: dict[str, InfantProfile] = {}


@asynccontextmanager
async def lifespan(app: FastAPI):
    print("Loading WHO growth reference...")
    print(f"✓ System ready — {len(_engine.available_series)} reference series")
    yield
    print("Shutting down")


# ── App ──────────────────────────────────────────────────────

_deps = [Depends(verify_credentials)] if AUTH_ENABLED else []

app = FastAPI(
    title="Infant Growth Percentiles API",
    description=(
        "WHO Child Growth Standards percentile engine (LMS method). "
        "Scores weight, length/height and head circumference for infants "
        "0–24 months and serves reference percentile curves for charting."
    ),
    version=VERSION,
    lifespan=lifespan,
    dependencies=_deps,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request / Response Models ─────────────────────────────────

class CreateInfantRequest(BaseModel):
    infant_id: str = Field(..., description="Unique identifier")
    sex: str = Field(..., pattern=SEX_PATTERN)
    birth_date: date
    name: Optional[str] = None

class UpdateInfantRequest(BaseModel):
    name: Optional[str] = None
    sex: Optional[str] = Field(None, pattern=SEX_PATTERN)
    birth_date: Optional[date] = None

class MeasurementRequest(BaseModel):
    id: str = Field(..., description="Measurement id; an existing id is replaced")
    date: date
    weight_kg: float = Field(..., ge=WEIGHT_KG_MIN, le=WEIGHT_KG_MAX)
    height_cm: float = Field(..., ge=HEIGHT_CM_MIN, le=HEIGHT_CM_MAX)
    head_cm: float = Field(..., ge=HEAD_CM_MIN, le=HEAD_CM_MAX)

class MeasurementResponse(BaseModel):
    id: str
    date: date
    age_in_days: int
    weight_kg: float
    height_cm: float
    head_cm: float
    weight_percentile: Optional[float] = None
    height_percentile: Optional[float] = None
    head_percentile: Optional[float] = None
    weight_band: Optional[str] = None
    height_band: Optional[str] = None
    head_band: Optional[str] = None

class PercentileResponse(BaseModel):
    type: str
    sex: str
    value: float
    age_days: int
    z_score: Optional[float] = None
    percentile: Optional[float] = None
    band: Optional[str] = None

class WHOPercentilePoint(BaseModel):
    age_days: int
    value: float

class WHOPercentileLine(BaseModel):
    percentile: float
    points: List[WHOPercentilePoint]


# ── Helper ────────────────────────────────────────────────────

def _get_infant(infant_id: str) -> InfantProfile:
    if infant_id not in _infants:
        raise HTTPException(404, f"Infant '{infant_id}' not found")
    return _infants[infant_id]


def _parse_percentiles(percentiles: Optional[str]) -> List[float]:
    """Comma-separated percentiles; None falls back to the configured chart set."""
    if percentiles is None:
        return list(settings.CHART_PERCENTILES)
    try:
        pct_list = [float(x.strip()) for x in percentiles.split(",")]
    except ValueError:
        raise HTTPException(422, f"Invalid percentile list: {percentiles!r}") from None
    if not all(math.isfinite(p) for p in pct_list):
        raise HTTPException(422, f"Percentiles must be finite: {percentiles!r}")
    return pct_list


def _lines(measurement_type: str, sex: str,
           percentiles: List[float]) -> List[WHOPercentileLine]:
    return [
        WHOPercentileLine(
            percentile=line['percentile'],
            points=[WHOPercentilePoint(age_days=p.age, value=p.value)
                    for p in line['points']],
        )
        for line in build_percentile_lines(measurement_type, sex, percentiles, _engine)
    ]


def _measurement_response(m) -> MeasurementResponse:
    return MeasurementResponse(
        **m.to_dict(),
        weight_band=percentile_band(m.weight_percentile),
        height_band=percentile_band(m.height_percentile),
        head_band=percentile_band(m.head_percentile),
    )


# ── Endpoints ─────────────────────────────────────────────────

@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "series_available": [f"{t}/{s}" for t, s in _engine.available_series],
        "infants_tracked": len(_infants),
        "version": VERSION,
    }


# ── Percentiles ───────────────────────────────────────────────

@app.get("/percentile", response_model=PercentileResponse)
async def get_percentile(
    value: float = Query(..., gt=0, allow_inf_nan=False),
    age_days: int = Query(..., ge=0),
    type: str = Query("weight", pattern=TYPE_PATTERN),
    sex: str = Query("male", pattern=SEX_PATTERN),
):
    z = _engine.calculate_z_score(value, age_days, type, sex)
    pct = _engine.calculate_percentile(value, age_days, type, sex)
    return PercentileResponse(
        type=type, sex=sex, value=value, age_days=age_days,
        z_score=round(z, 3) if z is not None else None,
        percentile=pct, band=percentile_band(pct),
    )


# ── WHO Reference Lines ──────────────────────────────────────

@app.get("/who/percentile-lines")
async def get_who_percentiles(
    type: str = Query("weight", pattern=TYPE_PATTERN),
    sex: str = Query("male", pattern=SEX_PATTERN),
    percentiles: Optional[str] = Query(None, description="Comma-separated; defaults to CHART_PERCENTILES"),
):
    pct_list = _parse_percentiles(percentiles)
    return {"type": type, "sex": sex, "lines": _lines(type, sex, pct_list)}


# ── Infant CRUD ───────────────────────────────────────────────

@app.post("/infants", status_code=201)
async def create_infant(req: CreateInfantRequest):
    if req.infant_id in _infants:
        raise HTTPException(409, f"Infant '{req.infant_id}' already exists")

    profile = InfantProfile(
        infant_id=req.infant_id,
        sex=req.sex,
        birth_date=req.birth_date,
        name=req.name,
        engine=_engine,
    )
    _infants[req.infant_id] = profile
    return profile.to_dict()


@app.get("/infants")
async def list_infants():
    return {
        "count": len(_infants),
        "infants": [
            {"infant_id": p.infant_id, "sex": p.sex,
             "measurement_count": len(p.measurements)}
            for p in _infants.values()
        ],
    }


@app.get("/infants/{infant_id}")
async def get_infant(infant_id: str):
    return _get_infant(infant_id).to_dict()


@app.put("/infants/{infant_id}")
async def update_infant(infant_id: str, req: UpdateInfantRequest):
    profile = _get_infant(infant_id)
    profile.update_profile(name=req.name, birth_date=req.birth_date, sex=req.sex)
    return profile.to_dict()


# ── Measurements ──────────────────────────────────────────────

@app.post("/infants/{infant_id}/measurements",
          response_model=MeasurementResponse)
async def add_measurement(infant_id: str, req: MeasurementRequest):
    profile = _get_infant(infant_id)
    if not is_valid_measurement_date(req.date, profile.birth_date):
        raise HTTPException(
            422, "Measurement date must be between the birth date and today"
        )

    m = profile.add_measurement(
        req.id, req.date, req.weight_kg, req.height_cm, req.head_cm
    )
    return _measurement_response(m)


@app.delete("/infants/{infant_id}/measurements/{measurement_id}",
            status_code=204)
async def delete_measurement(infant_id: str, measurement_id: str):
    profile = _get_infant(infant_id)
    if not profile.remove_measurement(measurement_id):
        raise HTTPException(404, f"Measurement '{measurement_id}' not found")


# ── Chart ────────────────────────────────────────────────────

@app.get("/infants/{infant_id}/chart")
async def get_chart(
    infant_id: str,
    type: str = Query("weight", pattern=TYPE_PATTERN),
    percentiles: Optional[str] = Query(None, description="Comma-separated; defaults to CHART_PERCENTILES"),
):
    profile = _get_infant(infant_id)
    pct_list = _parse_percentiles(percentiles)
    return {
        "type": type,
        "sex": profile.sex,
        "lines": _lines(type, profile.sex, pct_list),
        "measurements": [
            {"age_days": age, "value": value}
            for age, value in measurement_points(profile, type)
        ],
    }


# ── Run ───────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("src.api.server:app", host=HOST, port=PORT, reload=DEBUG)
