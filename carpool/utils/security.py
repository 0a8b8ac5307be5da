from datetime import datetime, timedelta, timezone

from jose import JWTError, ExpiredSignatureError, jwt
from passlib.context import CryptContext

from carpool.config import Settings
from carpool.utils.exceptions import TokenExpiredException, UnauthorizedException


class SecurityService:
    """
    Password hashing and access-token handling, bound to one Settings instance.
    Built once by create_app() and shared through the AppContext.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=settings.BCRYPT_ROUNDS,
        )

    # ─── Password Hashing ─────────────────────────────────────────────────────
    def hash_password(self, plain_password: str) -> str:
        """bcrypt hash at the configured cost (BCRYPT_ROUNDS)."""
        return self.pwd_context.hash(plain_password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        return self.pwd_context.verify(plain_password, hashed_password)

    # ─── JWT ──────────────────────────────────────────────────────────────────
    @property
    def expires_in(self) -> int:
        return self.settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60

    def create_access_token(self, user_id: int, email: str, role: str) -> str:
        """Signed token carrying the identity claims: sub (user id), email, role, plus type and exp."""
        expire = datetime.now(timezone.utc) + timedelta(minutes=self.settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        payload = {
            "sub": str(user_id),
            "email": email,
            "role": role,
            "type": "access",
            "exp": expire,
        }
        return jwt.encode(payload, self.settings.SECRET_KEY, algorithm=self.settings.ALGORITHM)

    def verify_access_token(self, token: str) -> dict:
        """Claims of a valid access token. Expired -> TOKEN_EXPIRED, anything else wrong -> UNAUTHORIZED."""
        try:
            payload = jwt.decode(token, self.settings.SECRET_KEY, algorithms=[self.settings.ALGORITHM])
        except ExpiredSignatureError:
            raise TokenExpiredException()
        except JWTError:
            raise UnauthorizedException("Invalid or malformed token")

        if payload.get("type") != "access":
            raise UnauthorizedException("Invalid token type")
        return payload
