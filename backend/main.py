from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from config import check_api_keys_on_startup, logger, settings
from exceptions import AnalysisTimeoutException, EmptyInputException, ValidationException
from middleware import RequestContextMiddleware, get_request_id
from models import AnalysisReport, AnalyzeRequest
from services import JudgeIdentityCache
from services.analysis_service import AnalysisService

app = FastAPI(title="Verity", description="Screenshot fact-check analysis API")

app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Assistant ids are shared by every request in the process.
identity_cache = JudgeIdentityCache()


@app.on_event("startup")
async def startup_event():
    missing = check_api_keys_on_startup()
    if missing:
        logger.warning("Starting in degraded mode; missing: %s", ", ".join(missing))


def get_analysis_service() -> AnalysisService:
    return AnalysisService.from_settings(settings, identity_cache)


@app.get("/")
async def health_check(service: AnalysisService = Depends(get_analysis_service)):
    return {
        "status": "ok",
        "message": "Verity API is running.",
        "capabilities": service.capabilities(),
        "cachedJudges": len(identity_cache),
    }


@app.post("/analyze", response_model=AnalysisReport, response_model_by_alias=True)
async def analyze(
    req: AnalyzeRequest,
    request: Request,
    service: AnalysisService = Depends(get_analysis_service),
):
    text = (req.text or "").strip()
    if not text:
        raise HTTPException(status_code=400, detail="Empty text.")

    try:
        return await service.analyze(text, job_id=getattr(request.state, "request_id", None) or get_request_id())
    except (EmptyInputException, ValidationException) as e:
        raise HTTPException(status_code=400, detail=e.to_dict())
    except AnalysisTimeoutException as e:
        raise HTTPException(status_code=504, detail=e.to_dict())
