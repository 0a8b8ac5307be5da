from sqlalchemy.orm import Session

from carpool.models.user import User, RoleName
from carpool.schemas.auth import LoginRequest, RegisterRequest
from carpool.utils.audit import log_action
from carpool.utils.exceptions import UnauthorizedException, DuplicateEntryException
from carpool.utils.security import SecurityService


class AuthService:

    def __init__(self, security: SecurityService):
        self.security = security

    def _token_payload(self, user: User) -> dict:
        return {
            "token":     self.security.create_access_token(user.id, user.email, user.role.value),
            "tokenType": "Bearer",
            "expiresIn": self.security.expires_in,
            "user": {
                "id":           user.id,
                "fullName":     user.fullName,
                "email":        user.email,
                "role":         user.role.value,
                "rating":       user.rating,
                "reviewsCount": user.reviewsCount,
            }
        }

    # ─── Register ─────────────────────────────────────────────────────────────
    def register(self, db: Session, data: RegisterRequest) -> dict:
        if db.query(User).filter(User.email == data.email).first():
            raise DuplicateEntryException("Email already registered", field="email")

        user = User(
            fullName=data.fullName,
            email=data.email,
            phone=data.phone,
            password=self.security.hash_password(data.password),
            role=RoleName.DRIVER if data.isDriver else RoleName.PASSENGER,
            rating=0.0,
            reviewsCount=0,
        )
        db.add(user)
        db.flush()  # Get user.id without committing

        log_action(db, user.id, "REGISTER", "User", user.id,
                   f"New {user.role.value} registered: {user.fullName} ({user.email})")
        db.commit()
        db.refresh(user)
        return self._token_payload(user)

    # ─── Login ────────────────────────────────────────────────────────────────
    def login(self, db: Session, data: LoginRequest) -> dict:
        user = db.query(User).filter(User.email == data.email).first()

        if not user or not self.security.verify_password(data.password, user.password):
            raise UnauthorizedException("Invalid email or password")

        return self._token_payload(user)
