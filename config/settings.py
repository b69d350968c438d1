"""
Configuration for the Infant Growth Percentile service.
"""
import os

# ── Server ────────────────────────────────────────────────────
PORT = int(os.environ.get("PORT", 8000))
HOST = os.environ.get("HOST", "0.0.0.0")
DEBUG = os.environ.get("DEBUG", "false").lower() == "true"

# ── Auth (optional) ───────────────────────────────────────────
AUTH_ENABLED = os.environ.get("AUTH_ENABLED", "false").lower() == "true"
AUTH_USERNAME = os.environ.get("AUTH_USERNAME", "admin")
AUTH_PASSWORD = os.environ.get("AUTH_PASSWORD", "changeme")

# ── Growth charts ─────────────────────────────────────────────
CHART_PERCENTILES = [
    float(p) for p in
    os.environ.get("CHART_PERCENTILES", "3,10,25,50,75,90,97").split(",")
]

# Percentile bands used when flagging a measurement
PERCENTILE_ALERT_LOW = 3.0
PERCENTILE_ALERT_HIGH = 97.0
PERCENTILE_NORMAL_LOW = 25.0
PERCENTILE_NORMAL_HIGH = 75.0

# ── Measurement plausibility (SI units) ───────────────────────
WEIGHT_KG_MIN = 0.5
WEIGHT_KG_MAX = 30.0
HEIGHT_CM_MIN = 40.0
HEIGHT_CM_MAX = 120.0
HEAD_CM_MIN = 30.0
HEAD_CM_MAX = 55.0

VERSION = "1.0.0"
