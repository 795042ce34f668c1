# ============================================================================
# api/main.py
# ============================================================================
"""
FastAPI Backend for the Prescription Tracker

Runs on port 8000.
Provides the data-entry surface: medication search, medication notes,
prescription notes and form pick lists.
"""

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from prescription_tracker.config import base_settings, logging_settings
from prescription_tracker.core import MedicationCandidate, PrescriptionData
from prescription_tracker.core.tracker import PrescriptionTracker
from prescription_tracker.utils import (
    InvalidNoteLocationError,
    NoteError,
    NoteExistsError,
    NoteNotFoundError,
    setup_logging,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and open the tracker for the configured vault."""
    setup_logging(
        level=logging_settings.LOG_LEVEL,
        log_file=logging_settings.LOG_FILE,
        format_json=logging_settings.LOG_JSON,
    )
    base_settings.create_directories()
    app.state.tracker = PrescriptionTracker(vault_path=base_settings.VAULT_PATH)
    logger.info(f"API ready, vault: {base_settings.VAULT_PATH}")
    try:
        yield
    finally:
        await app.state.tracker.close()
        logger.info("API shut down")


app = FastAPI(
    title="Prescription Tracker API",
    description="Medication search, enrichment and note generation for a Markdown vault",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_tracker(request: Request) -> PrescriptionTracker:
    return request.app.state.tracker


# ============================================================================
# Models
# ============================================================================

class CandidateModel(BaseModel):
    title: str
    name: str = ""
    concept_id: Optional[str] = None
    generic_names: List[str] = Field(default_factory=list)
    brand_names: List[str] = Field(default_factory=list)
    drug_class: List[str] = Field(default_factory=list)
    dosage_forms: List[str] = Field(default_factory=list)
    confidence_score: float = 0.0
    from_api: bool = True
    source_url: Optional[str] = None

    def to_candidate(self) -> MedicationCandidate:
        return MedicationCandidate(
            title=self.title,
            name=self.name,
            concept_id=self.concept_id,
            generic_names=self.generic_names,
            brand_names=self.brand_names,
            drug_class=self.drug_class,
            dosage_forms=self.dosage_forms,
            confidence_score=self.confidence_score,
            from_api=self.from_api,
        )


class MedicationNoteRequest(BaseModel):
    candidate: CandidateModel
    overwrite: bool = False


class ConvertRequest(BaseModel):
    path: str  # vault-relative


class PrescriptionRequest(BaseModel):
    medication_name: str
    fill_date: str
    dosage: str = ""
    obtained_date: str = ""
    pharmacy: str = ""
    prescription_number: str = ""
    days_supply: int = 0
    quantity_dispensed: str = ""
    quantity_written: str = ""
    copay: str = ""
    manufacturer: str = ""
    patient: str = ""
    frequency: str = ""
    prescribed_by: str = ""
    instructions: str = ""
    refills_remaining: int = 0
    notes: str = ""
    diagnosis: str = ""
    date_written: str = ""
    drug_label: str = ""
    substituted: str = ""


class NoteResponse(BaseModel):
    path: str


# ============================================================================
# Endpoints
# ============================================================================

@app.get("/api/health")
async def health():
    """Health check for monitoring."""
    return {"status": "healthy"}


@app.get("/api/medications/search")
async def search_medications(q: str, tracker: PrescriptionTracker = Depends(get_tracker)):
    """Ranked medication candidates for a free-text name."""
    candidates = await tracker.search_medications(q)
    return {"query": q, "results": [c.to_dict() for c in candidates]}


@app.post("/api/medications/notes", response_model=NoteResponse)
async def create_medication_note(
    request: MedicationNoteRequest,
    tracker: PrescriptionTracker = Depends(get_tracker)
):
    """Enrich the chosen candidate and write its medication note."""
    candidate = request.candidate.to_candidate()
    try:
        path = await tracker.create_medication_note(candidate, allow_overwrite=request.overwrite)
    except NoteExistsError as e:
        raise HTTPException(
            status_code=409,
            detail=f"A medication note for \"{candidate.title}\" already exists. {e}"
        )
    except NoteError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return NoteResponse(path=tracker.vault.relative(path))


@app.post("/api/medications/convert", response_model=NoteResponse)
async def convert_medication_note(
    request: ConvertRequest,
    tracker: PrescriptionTracker = Depends(get_tracker)
):
    """Rebuild an existing medication note from fresh source data."""
    try:
        path = await tracker.convert_medication_note(request.path)
    except NoteNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidNoteLocationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return NoteResponse(path=tracker.vault.relative(path))


@app.post("/api/prescriptions", response_model=NoteResponse)
async def create_prescription(
    request: PrescriptionRequest,
    tracker: PrescriptionTracker = Depends(get_tracker)
):
    """Write a prescription note into its date folder."""
    data = PrescriptionData(**request.model_dump())
    try:
        path = tracker.create_prescription_note(data)
    except NoteExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except NoteError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return NoteResponse(path=tracker.vault.relative(path))


@app.get("/api/lookups/{kind}")
async def lookups(kind: str, tracker: PrescriptionTracker = Depends(get_tracker)):
    """Pick lists for the data-entry form."""
    providers = {
        "doctors": tracker.lookups.doctors,
        "patients": tracker.lookups.patients,
        "medications": tracker.lookups.medications,
        "diagnoses": tracker.lookups.diagnoses,
        "manufacturers": tracker.lookups.manufacturers,
        "pharmacies": tracker.lookups.pharmacies,
    }
    provider = providers.get(kind)
    if provider is None:
        raise HTTPException(status_code=404, detail=f"Unknown lookup: {kind}")

    items = provider()
    return {"kind": kind, "items": [i.to_dict() if hasattr(i, "to_dict") else i for i in items]}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
