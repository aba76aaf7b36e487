"""Quote submission endpoint with Redis caching"""
import json
import hashlib
import logging
from fastapi import APIRouter, Depends, Request

from app.schemas.quote import QuoteRequest, QuoteResponse, PriceBreakdown
from app.services.pricing import calculate_price
from app.services.rate_tables import RateTables, get_rate_tables
from app.core.errors import QuoteError
from app.core.metrics import cache_hits, cache_misses, quotes_calculated
from app.core.rate_limit import check_rate_limit
from app.core.redis import get_redis
from app.core.config import settings

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["quotes"])

SUCCESS_MESSAGE = "Form submitted successfully"


def _generate_cache_key(req: QuoteRequest) -> str:
    params_str = json.dumps(req.model_dump(mode="json"), sort_keys=True)
    return f"price:{hashlib.sha256(params_str.encode()).hexdigest()}"


@router.post("/submit", response_model=QuoteResponse)
async def submit_quote(
    req: QuoteRequest,
    request: Request,
    tables: RateTables = Depends(get_rate_tables),
):
    client_id = request.client.host if request.client else "anonymous"
    await check_rate_limit(client_id)

    cache_key = _generate_cache_key(req)
    redis = get_redis()

    if redis is not None:
        try:
            cached = await redis.get(cache_key)
            if cached:
                cache_hits.labels(cache="price").inc()
                return QuoteResponse(
                    message=SUCCESS_MESSAGE,
                    data=PriceBreakdown.model_validate(json.loads(cached)),
                )
            cache_misses.labels(cache="price").inc()
        except Exception as e:
            logger.warning(f"Cache retrieval failed: {e}")

    try:
        breakdown = calculate_price(req, tables)
    except QuoteError:
        quotes_calculated.labels(status="error").inc()
        raise
    quotes_calculated.labels(status="success").inc()

    if redis is not None:
        try:
            await redis.set(
                cache_key,
                json.dumps(breakdown.model_dump(by_alias=True), default=str),
                ex=settings.PRICE_CACHE_TTL
            )
        except Exception as e:
            logger.warning(f"Cache write failed: {e}")

    return QuoteResponse(message=SUCCESS_MESSAGE, data=breakdown)
