from fastapi import Depends
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from ..core import ApiError, ConfigService, ErrorCode, get_config_service, logger
from ..core.security import create_access_token
from ..database import get_db
from ..models import User
from ..schemas import Token, UserCreate


class AuthService:
    def __init__(self, config_service: ConfigService, db: AsyncSession):
        self.SECRET_KEY = config_service.get("SECRET_KEY")
        if not self.SECRET_KEY:
            raise ValueError("SECRET_KEY is required")
        self.pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
        self.db = db

    def get_password_hash(self, password: str) -> str:
        return self.pwd_context.hash(password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        return self.pwd_context.verify(plain_password, hashed_password)

    async def register_user(self, user: UserCreate) -> User:
        email = user.email.lower()
        result = await self.db.execute(select(User).where(User.email == email))
        if result.scalars().first():
            raise ApiError(ErrorCode.BAD_REQUEST, "Email already registered", status_code=400)

        new_user = User(email=email, name=user.name, hashed_password=self.get_password_hash(user.password))
        self.db.add(new_user)
        try:
            await self.db.commit()
        except IntegrityError:
            # a concurrent registration won the unique email
            await self.db.rollback()
            raise ApiError(ErrorCode.BAD_REQUEST, "Email already registered", status_code=400)
        await self.db.refresh(new_user)
        logger.info("Registered user %s", new_user.id)
        return new_user

    async def login_user(self, email: str, password: str) -> Token:
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        user = result.scalars().first()
        if not user or not self.verify_password(password, user.hashed_password):
            raise ApiError(ErrorCode.UNAUTHORIZED, "Invalid credentials", status_code=401)

        access_token = create_access_token({"sub": str(user.id), "email": user.email}, self.SECRET_KEY)
        return Token(access_token=access_token, token_type="bearer")


def get_auth_service(config_service: ConfigService = Depends(get_config_service),
                     db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(config_service=config_service, db=db)
