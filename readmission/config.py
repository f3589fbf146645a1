"""Configuration: environment, YAML risk rules, canonical page text."""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

# Project paths
PACKAGE_DIR = Path(__file__).resolve().parent
PROJECT_DIR = PACKAGE_DIR.parent

load_dotenv(PROJECT_DIR / ".env")

MODEL = os.getenv("RISK_RADAR_MODEL", "gpt-4o")
LOG_LEVEL = os.getenv("RISK_RADAR_LOG_LEVEL", "INFO")

RETRY_ATTEMPTS = int(os.getenv("RISK_RADAR_RETRY_ATTEMPTS", "3"))
RETRY_BASE_DELAY = float(os.getenv("RISK_RADAR_RETRY_BASE_DELAY", "1.0"))  # seconds

# =============================================================================
# Load YAML Config
# =============================================================================

with open(PACKAGE_DIR / "risk_rules.yaml") as f:
    RISK_RULES = yaml.safe_load(f)

with open(PACKAGE_DIR / "page_text.yaml") as f:
    PAGE_TEXT = yaml.safe_load(f)

RISK_THRESHOLD: int = RISK_RULES["threshold"]
VISIT_BANDS: list[tuple[int, int]] = [(b["above"], b["points"]) for b in RISK_RULES["visit_bands"]]
AGE_BANDS: list[tuple[int, int]] = [(b["above"], b["points"]) for b in RISK_RULES["age_bands"]]
CRITICAL_DIAGNOSES: dict[str, int] = {
    term.lower(): RISK_RULES["critical_diagnoses"]["weight"]
    for term in RISK_RULES["critical_diagnoses"]["terms"]
}
CRITICAL_CONDITIONS: dict[str, int] = {
    term.lower(): RISK_RULES["critical_conditions"]["weight"]
    for term in RISK_RULES["critical_conditions"]["terms"]
}

ENGLISH = "English"
SUPPORTED_LANGUAGES: list[str] = PAGE_TEXT["languages"]
DEFAULT_TITLE: str = PAGE_TEXT["page"]["title"]
DEFAULT_DESCRIPTION: str = PAGE_TEXT["page"]["description"]


# =============================================================================
# Build Risk Rules Reference (served for auditing)
# =============================================================================

def build_risk_rules_reference() -> str:
    """Render the scoring rules as a plain-text table."""
    lines = ["=== READMISSION RISK RULES ==="]

    lines.append("\n--- Prior inpatient visits (highest band only) ---")
    for above, points in VISIT_BANDS:
        lines.append(f"  more than {above}: +{points}")

    lines.append("\n--- Age (highest band only) ---")
    for above, points in AGE_BANDS:
        lines.append(f"  older than {above}: +{points}")

    lines.append("\n--- Critical diagnoses (each match adds) ---")
    for term, weight in CRITICAL_DIAGNOSES.items():
        lines.append(f"  {term}: +{weight}")

    lines.append("\n--- Critical conditions (each match adds, flags an emergency) ---")
    for term, weight in CRITICAL_CONDITIONS.items():
        lines.append(f"  {term}: +{weight}")

    lines.append(f"\nScore >= {RISK_THRESHOLD} is High risk, otherwise Low.")
    return "\n".join(lines)


RISK_RULES_REFERENCE = build_risk_rules_reference()
