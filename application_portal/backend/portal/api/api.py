# File: backend/portal/api/api.py
from fastapi import APIRouter

from portal.api.endpoints import submit, pdf, submissions

api_router = APIRouter(prefix="/api")
api_router.include_router(submit.router, tags=["submit"])
api_router.include_router(pdf.router, tags=["pdf"])
api_router.include_router(submissions.router, prefix="/submissions", tags=["submissions"])
