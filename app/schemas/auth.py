from app.schemas.base import CamelModel

class Token(CamelModel):
    access_token: str
    token_type: str = "bearer"

class TokenPayload(CamelModel):
    sub: str | None = None
    email: str | None = None
    role: str | None = None
