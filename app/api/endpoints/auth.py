from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.api.services.auth_service import AuthService
from app.db.session import get_db
from app.schemas.user import LoginResponse, UserCreate, UserLogin, UserOut

router = APIRouter(prefix="/auth", tags=["Auth"])


def client_ip(request: Request):
    return request.client.host if request.client else None


@router.post("/register", response_model=UserOut, status_code=201)
def register(payload: UserCreate, request: Request, db: Session = Depends(get_db)):
    return AuthService.create_user(db, payload, ip_address=client_ip(request))


@router.post("/login", response_model=LoginResponse)
def login(payload: UserLogin, request: Request, db: Session = Depends(get_db)):
    result = AuthService.login(db, payload.email, payload.password, ip_address=client_ip(request))
    return LoginResponse(
        access_token=result["access_token"],
        user=UserOut.model_validate(result["user"]),
    )
