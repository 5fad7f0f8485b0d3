import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from print_quote import __version__
from print_quote.engine import PricingError, format_currency
from print_quote.engine.pricing_table import get_file_hash, table_to_dict
from print_quote.api.state import engine

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Print Quote API",
    description="Instant pricing for 3D printed parts",
    version=__version__
)

# Enable CORS for the site frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class QuoteRequest(BaseModel):
    length_mm: float
    width_mm: float
    height_mm: float
    material: str
    infill_percent: float
    layer_height: str
    quantity: int = 1


@app.exception_handler(PricingError)
async def pricing_error_handler(request: Request, exc: PricingError):
    return JSONResponse(status_code=422, content={"detail": exc.to_dict()})


@app.get("/")
async def root():
    return {"status": "online", "message": "Print Quote API Active"}


@app.post("/quote")
async def calculate_quote(req: QuoteRequest):
    try:
        breakdown = engine.quote(
            length_mm=req.length_mm,
            width_mm=req.width_mm,
            height_mm=req.height_mm,
            material=req.material,
            infill_percent=req.infill_percent,
            layer_height=req.layer_height,
            quantity=req.quantity,
        )
    except PricingError:
        raise
    except Exception as e:
        logger.exception("Quote calculation failed")
        raise HTTPException(status_code=500, detail=str(e))

    currency = breakdown.currency
    result = breakdown.to_dict()
    result["formatted"] = {
        "material_cost": format_currency(breakdown.material_cost, currency),
        "machine_cost": format_currency(breakdown.machine_cost, currency),
        "setup_fee": format_currency(breakdown.setup_fee, currency),
        "per_part_subtotal": format_currency(breakdown.per_part_subtotal, currency),
        "total_before_discount": format_currency(breakdown.total_before_discount, currency),
        "discount_amount": format_currency(breakdown.discount_amount, currency),
        "total": format_currency(breakdown.total, currency),
        "print_time": breakdown.print_time,
    }
    result["trace_text"] = breakdown.get_trace_text()
    return jsonable_encoder(result)


@app.get("/pricing-table")
async def get_pricing_table():
    return table_to_dict(engine.table)


@app.get("/system/status")
async def get_status():
    settings = engine.settings
    table_path = settings.pricing_table if settings else None
    return {
        "engine_active": True,
        "pricing_table": str(table_path) if table_path else None,
        "pricing_table_hash": get_file_hash(table_path) if table_path else None,
        "materials": [m.value for m in engine.table.materials],
        "layer_heights": [lh.value for lh in engine.table.layer_heights],
        "discount_tiers": len(engine.table.quantity_discounts),
    }
