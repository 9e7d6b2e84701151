from fastapi import APIRouter
from app.api.api_v1.endpoints import (
    auth, users, partners, service_providers, cases, claims, financial_step, offboarding_step, health,
)

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(partners.router, prefix="/partners", tags=["partners"])
api_router.include_router(service_providers.router, prefix="/service-providers", tags=["service-providers"])
api_router.include_router(cases.router, prefix="/cases", tags=["cases"])
api_router.include_router(claims.router, prefix="/claims", tags=["claims"])
api_router.include_router(financial_step.router, prefix="/claims", tags=["financial-step"])
api_router.include_router(offboarding_step.router, prefix="/claims", tags=["offboarding-step"])
api_router.include_router(health.router, prefix="/health", tags=["health"])
