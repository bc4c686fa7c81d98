from fastapi import APIRouter

router = APIRouter(tags=["meta"])

# liveness probe
@router.get("/health")
def health() -> dict:
    return {"status": "ok"}
