from sqlalchemy.orm import Session
from fastapi import HTTPException
from app.api.models.profile import Profile
from app.api.services.permission_service import PermissionManager
from app.core.errors import AppError, RateLimitError
from app.core.security import criar_token, get_password_hash, verify_password


class AuthService:

    @staticmethod
    def create_user(db: Session, data, ip_address: str = None) -> Profile:
        email = data.email.strip().lower()

        if not PermissionManager.check_rate_limit(email):
            raise RateLimitError(
                "Muitas tentativas de cadastro. Tente novamente em alguns minutos.",
                "RATE_LIMIT",
                "signup",
            )

        # bcrypt: limite de 72 BYTES
        if len(data.password.encode("utf-8")) > 72:
            raise AppError("Senha muito longa (máx. 72 bytes)", "VALIDATION_ERROR", "signup")

        existing = db.query(Profile).filter(Profile.email == email).first()
        if existing:
            PermissionManager.track_auth_attempt(db, email, "signup", False, ip_address)
            raise HTTPException(status_code=400, detail="Email already registered")

        user = Profile(
            email=email,
            password_hash=get_password_hash(data.password),
            name=data.name,
            clinic_name=data.clinic_name,
            service_type=data.service_type,
            phone=data.phone,
        )

        db.add(user)
        db.commit()
        db.refresh(user)

        PermissionManager.track_auth_attempt(db, email, "signup", True, ip_address)
        return user

    @staticmethod
    def authenticate(db: Session, email: str, password: str):
        user = db.query(Profile).filter(Profile.email == email).first()

        if not user:
            return None

        if not verify_password(password, user.password_hash):
            return None

        return user

    @staticmethod
    def login(db: Session, email: str, password: str, ip_address: str = None):
        email = email.strip().lower()

        if not PermissionManager.check_rate_limit(email):
            raise RateLimitError(
                "Muitas tentativas de login. Tente novamente em alguns minutos.",
                "RATE_LIMIT",
                "login",
            )

        user = AuthService.authenticate(db, email, password)
        PermissionManager.track_auth_attempt(db, email, "login", user is not None, ip_address)

        if not user:
            raise HTTPException(status_code=401, detail="Invalid credentials")

        if not user.is_active:
            raise AppError("Conta desativada. Entre em contato com o suporte.", "ACCOUNT_INACTIVE", "login", 403)

        # Cria o token JWT
        token = criar_token({"sub": str(user.id)})

        return {
            "access_token": token,
            "token_type": "bearer",
            "user": user,
        }
