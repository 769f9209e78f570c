# postgen/features/topics/router.py
from fastapi import APIRouter
from .schemas import RelatedTopicsRequest, RelatedTopicsResponse
from .service import suggest_topics

router = APIRouter(prefix="/api/v1", tags=["related-topics"])

@router.post("/generate/related-topics", response_model=RelatedTopicsResponse)
async def related_topics_endpoint(req: RelatedTopicsRequest) -> RelatedTopicsResponse:
    return RelatedTopicsResponse(topics=await suggest_topics(req.topic))
