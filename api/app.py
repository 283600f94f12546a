"""
MealPlan Extractor — FastAPI Backend
"""

import sys
from pathlib import Path
from datetime import datetime
from typing import Optional, Dict, Any, List

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from fastapi import FastAPI, HTTPException, UploadFile, File
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
import uvicorn

from dotenv import load_dotenv
load_dotenv()

from agents.document_agent import (
    InsufficientTextError,
    UnsupportedDocumentError,
    detect_file_type,
    parse_document_text,
    parse_to_structured_meal_plan,
    parse_uploaded_file,
)
from parsing.schemas import ExtractionResult, RawDocument

# =============================================================================
# IMPORTS — Optional collaborators
# =============================================================================
try:
    from memory.food_catalog import JsonFoodCatalog
    FOOD_CATALOG = JsonFoodCatalog()
    CATALOG_READY = FOOD_CATALOG.size > 0
except ImportError as e:
    print(f"❌ Food Catalog Failed: {e}")
    FOOD_CATALOG = None
    CATALOG_READY = False

try:
    from agents.llm_extraction_agent import (
        get_parser_info, is_llm_parser_available, parse_document_with_llm
    )
    LLM_READY = is_llm_parser_available()
except ImportError as e:
    print(f"⚠️ LLM Extraction unavailable: {e}")
    LLM_READY = False

    def get_parser_info():
        return {"name": "Pipeline parser", "available": False, "model": None}


# =============================================================================
# PYDANTIC MODELS
# =============================================================================
class ParseTextRequest(BaseModel):
    text: str
    use_llm: bool = False


class StructuredResponse(BaseModel):
    status: str
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    confidence: float = 0.0
    warnings: List[str] = []
    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())


# =============================================================================
# APP SETUP
# =============================================================================
app = FastAPI(
    title="MealPlan Extractor API",
    version="1.0.0",
    description="Trilingual (HU/RO/EN) meal-plan document extraction"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================
def to_http_error(error: Exception) -> HTTPException:
    """Map document errors to status codes: 400 for too little text, 415 otherwise."""
    if isinstance(error, InsufficientTextError):
        return HTTPException(status_code=400, detail=str(error))
    return HTTPException(status_code=415, detail=str(error))


# =============================================================================
# ENDPOINTS
# =============================================================================

# -----------------------------------------------------------------------------
# Health & Root
# -----------------------------------------------------------------------------
@app.get("/")
async def root():
    """Root endpoint for health checking."""
    return {
        "status": "online",
        "system": "MealPlan Extractor",
        "version": "1.0.0",
        "docs": "/docs",
        "parser": get_parser_info(),
    }


@app.get("/api/v1/health")
async def api_health():
    """Detailed health check endpoint."""
    return {
        "status": "online",
        "components": {
            "pipeline": True,
            "llm": LLM_READY,
            "catalog": CATALOG_READY,
        },
        "timestamp": datetime.now().isoformat()
    }


# -----------------------------------------------------------------------------
# Documents
# -----------------------------------------------------------------------------
@app.post("/api/v1/documents/parse", response_model=ExtractionResult)
async def parse_text(request: ParseTextRequest):
    """
    Parse pasted document text.
    Set use_llm to try Gemini first; the pipeline runs when it is unavailable.
    """
    print(f"📥 PARSE REQUEST: {len(request.text)} chars, use_llm={request.use_llm}")
    try:
        if request.use_llm and LLM_READY:
            return await parse_document_with_llm(request.text, FOOD_CATALOG)
        return await parse_document_text(request.text, FOOD_CATALOG)
    except (InsufficientTextError, UnsupportedDocumentError) as e:
        raise to_http_error(e)


@app.post("/api/v1/documents/upload", response_model=ExtractionResult)
async def upload_document(file: UploadFile = File(...)):
    """Parse an uploaded text, word or pdf file. Images are rejected with 415."""
    content = await file.read()
    document = RawDocument(
        filename=file.filename or "",
        content_type=file.content_type or "",
        content=content,
        format=detect_file_type(file.filename or "", file.content_type or ""),
    )
    print(f"📥 UPLOAD: {document.filename} ({document.format}, {len(content)} bytes)")
    try:
        return await parse_uploaded_file(document, FOOD_CATALOG)
    except (InsufficientTextError, UnsupportedDocumentError) as e:
        raise to_http_error(e)


@app.post("/api/v1/documents/structured", response_model=StructuredResponse)
async def structured_plan(request: ParseTextRequest):
    """
    Week/day/meal JSON for pasted text.
    A document without a usable plan returns status "error" with the reason.
    """
    try:
        result = await parse_to_structured_meal_plan(request.text, FOOD_CATALOG)
    except (InsufficientTextError, UnsupportedDocumentError) as e:
        raise to_http_error(e)

    return StructuredResponse(
        status=result["status"],
        data=result.get("data"),
        error=result.get("error"),
        confidence=result.get("confidence", 0.0),
        warnings=result.get("warnings", []),
    )


# =============================================================================
# MAIN
# =============================================================================
if __name__ == "__main__":
    print("\n" + "=" * 50)
    print("🚀 MEALPLAN EXTRACTOR API v1.0.0")
    print("=" * 50)
    print(f"📊 Components Status:")
    print(f"   • Pipeline:     ✅")
    print(f"   • Gemini LLM:   {'✅' if LLM_READY else '❌'}")
    print(f"   • Food Catalog: {'✅' if CATALOG_READY else '❌'}")
    print("=" * 50)
    print("🔗 API Docs: http://localhost:8000/docs")
    print("=" * 50 + "\n")

    uvicorn.run(app, host="0.0.0.0", port=8000)
