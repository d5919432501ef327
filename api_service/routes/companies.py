"""
Company routes.

- GET  /api/companies  - List companies (most recently researched first)
- POST /api/companies  - Create a company (manual entry or saved research)
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Request
from pydantic import Field

from src.common.errors import ErrorCode
from src.common.repositories import (
    Collections,
    get_repository,
    new_id,
    normalize_company_name,
    to_api,
    utcnow,
)
from src.validations.base import ApiModel

from ..dependencies import api_rate_limit
from ..responses import error_response, parse_request_body, success_response, success_with_meta

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/companies", tags=["companies"], dependencies=[Depends(api_rate_limit)])


class CompanyCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)
    glassdoor_data: Optional[Dict[str, Any]] = None
    funding_data: Optional[Dict[str, Any]] = None
    culture_signals: Optional[Dict[str, Any]] = None
    competitors: Optional[List[Any]] = None


@router.get("")
async def list_companies(limit: int = 50, offset: int = 0):
    limit = min(max(limit, 1), 100)
    offset = max(offset, 0)
    try:
        companies = get_repository(Collections.COMPANIES).find(
            {}, sort=[("cached_at", -1)], limit=limit, skip=offset
        )
    except Exception as e:
        logger.error(f"Error fetching companies: {e}")
        return error_response(ErrorCode.FETCH_ERROR, "Failed to fetch companies", 500)

    return success_with_meta(
        [to_api(c) for c in companies],
        {"limit": limit, "offset": offset, "total": len(companies)},
    )


@router.post("")
async def create_company(request: Request):
    body = await parse_request_body(request, CompanyCreate)

    repo = get_repository(Collections.COMPANIES)
    key = normalize_company_name(body.name)
    try:
        if repo.find_one({"name": key}):
            return error_response(ErrorCode.DUPLICATE, f"Company '{body.name}' already exists", 409)

        company = {
            "_id": new_id(),
            "name": key,
            "display_name": body.name.strip(),
            "glassdoor_data": body.glassdoor_data,
            "funding_data": body.funding_data,
            "culture_signals": body.culture_signals,
            "competitors": body.competitors,
            "cached_at": utcnow(),
        }
        repo.insert_one(company)
    except Exception as e:
        logger.error(f"Error creating company: {e}")
        return error_response(ErrorCode.CREATE_ERROR, "Failed to create company", 500)

    return success_response(to_api(company), 201)
