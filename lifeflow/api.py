"""
LifeFlow — REST API
====================
FastAPI app exposing the donor registry, dashboard statistics and the
matching / forecasting / eligibility tools.

Endpoints:
    GET    /api/health                   Health check
    GET    /api/statistics               Donor statistics
    GET    /api/dashboard                Dashboard metrics
    GET    /api/donors                   List donors
    POST   /api/donors                   Register a donor (eligibility checked)
    GET    /api/donors/{id}              Get a single donor
    PATCH  /api/donors/{id}              Update donor fields
    DELETE /api/donors/{id}              Remove a donor
    GET    /api/requests                 List blood requests
    POST   /api/requests                 Log a request and return matching donors
    GET    /api/inventory                Inventory with relative bar widths
    PUT    /api/inventory/{blood_type}   Set units for a blood type
    GET    /api/match?blood_type=...     Rank compatible donors
    GET    /api/predict/{blood_type}     Demand forecast
    POST   /api/eligibility              Eligibility check
    GET    /api/network                  Connectivity status
    POST   /api/network/sync             Simulated sync

Run:
    uvicorn lifeflow.api:create_app --factory --reload
"""

from typing import Optional

from fastapi import FastAPI, Query, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from lifeflow.app import LifeFlowApp
from lifeflow.config import API_CORS_ORIGINS
from lifeflow.database import validate_blood_type
from lifeflow.storage import JSONFileStorage


BLOOD_TYPE_PATTERN = "^(A|B|AB|O)[+-]$"


# ═══════════════════════════════════════════════════════════════════════════
# PAYLOADS
# ═══════════════════════════════════════════════════════════════════════════

class DonorPayload(BaseModel):
    name: str
    email: str = ""
    blood_type: str = Field(..., pattern=BLOOD_TYPE_PATTERN)
    phone: str = ""
    age: int
    weight: float
    city: str = ""
    last_donation: str = "never"
    has_conditions: bool = False


class DonorUpdatePayload(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    blood_type: Optional[str] = Field(None, pattern=BLOOD_TYPE_PATTERN)
    phone: Optional[str] = None
    age: Optional[int] = None
    weight: Optional[float] = None
    city: Optional[str] = None
    last_donation: Optional[str] = None
    status: Optional[str] = None


class BloodRequestPayload(BaseModel):
    blood_type: str = Field(..., pattern=BLOOD_TYPE_PATTERN)
    city: str = ""
    urgency: str = "normal"
    units: int = Field(1, ge=1)


class InventoryUpdatePayload(BaseModel):
    units: int


class EligibilityPayload(BaseModel):
    age: int
    weight: float
    last_donation: str
    has_conditions: bool = False


# ═══════════════════════════════════════════════════════════════════════════
# APP FACTORY
# ═══════════════════════════════════════════════════════════════════════════

def create_app(lifeflow_app: Optional[LifeFlowApp] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Without an explicit LifeFlowApp, one is built on top of JSON files in
    the configured data directory. Connectivity is checked once up front.
    """
    lf = lifeflow_app or LifeFlowApp(storage=JSONFileStorage())

    app = FastAPI(
        title="LifeFlow API",
        description="Donor registry, blood inventory and donation heuristics",
        version="1.0.0",
    )
    app.state.lifeflow = lf
    lf.network.check_connection()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=API_CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Dashboard ──

    @app.get("/api/health")
    async def health():
        return {"status": "ok", "donors_loaded": len(lf.database.read_donors())}

    @app.get("/api/statistics")
    async def statistics():
        return lf.get_statistics().to_dict()

    @app.get("/api/dashboard")
    async def dashboard():
        return {**lf.get_dashboard(), **lf.get_headline_counters()}

    # ── Donors ──

    @app.get("/api/donors")
    async def list_donors():
        donors = lf.database.read_donors()
        return {"total": len(donors), "donors": [d.to_dict() for d in donors]}

    @app.post("/api/donors", status_code=201)
    async def register_donor(payload: DonorPayload):
        """Register a donor if the eligibility rules allow it."""
        try:
            result = lf.register_donor(payload.model_dump())
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        if not result.success:
            raise HTTPException(status_code=422, detail=result.to_dict())
        return result.to_dict()

    @app.get("/api/donors/{donor_id}")
    async def get_donor(donor_id: str):
        donor = lf.database.get_donor(donor_id)
        if not donor:
            raise HTTPException(status_code=404, detail="Donor not found")
        return donor.to_dict()

    @app.patch("/api/donors/{donor_id}")
    async def update_donor(donor_id: str, payload: DonorUpdatePayload):
        try:
            donor = lf.database.update_donor(donor_id, payload.model_dump(exclude_unset=True))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        if not donor:
            raise HTTPException(status_code=404, detail="Donor not found")
        return donor.to_dict()

    @app.delete("/api/donors/{donor_id}", status_code=204)
    async def delete_donor(donor_id: str):
        lf.database.delete_donor(donor_id)
        return Response(status_code=204)

    # ── Blood requests ──

    @app.get("/api/requests")
    async def list_requests():
        return {"requests": [r.to_dict() for r in lf.database.read_requests()]}

    @app.post("/api/requests", status_code=201)
    async def create_request(payload: BloodRequestPayload):
        """Log a blood request and return the best matching donors for it."""
        blood_request = lf.database.create_request(payload.model_dump())
        matches = lf.ai.smart_matching(
            blood_request.blood_type, blood_request.city, blood_request.urgency
        )
        return {
            "request": blood_request.to_dict(),
            "matches": [m.to_dict() for m in matches],
        }

    # ── Inventory ──

    @app.get("/api/inventory")
    async def inventory():
        return {"inventory": lf.get_inventory_display()}

    @app.put("/api/inventory/{blood_type}")
    async def update_inventory(blood_type: str, payload: InventoryUpdatePayload):
        try:
            lf.database.update_inventory(blood_type, payload.units)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return {"bloodType": blood_type, "units": payload.units}

    # ── Heuristics ──

    @app.get("/api/match")
    async def match(
        blood_type: str = Query(..., description="Recipient blood type"),
        city: str = Query("", description="Recipient city"),
        urgency: str = Query("normal", description="Urgency level (not yet weighted)"),
    ):
        """Rank compatible donors for a recipient."""
        # An unencoded "+" in the query string decodes to a space
        blood_type = blood_type.replace(" ", "+")
        try:
            validate_blood_type(blood_type)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        matches = lf.ai.smart_matching(blood_type, city, urgency)
        return {"total": len(matches), "matches": [m.to_dict() for m in matches]}

    @app.get("/api/predict/{blood_type}")
    async def predict(blood_type: str, days_ahead: int = Query(7, ge=1, le=90)):
        return lf.ai.predict_demand(blood_type, days_ahead).to_dict()

    @app.post("/api/eligibility")
    async def eligibility(payload: EligibilityPayload):
        return lf.ai.check_eligibility(
            payload.age, payload.weight, payload.last_donation, payload.has_conditions
        ).to_dict()

    # ── Network ──

    @app.get("/api/network")
    async def network():
        return {"connected": lf.network.is_connected, "label": lf.network.status_label()}

    @app.post("/api/network/sync")
    async def sync():
        return {"synced": await lf.network.sync_data()}

    return app
