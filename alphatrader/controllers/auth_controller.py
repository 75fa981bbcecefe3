from fastapi import APIRouter, Depends, status

from ..schemas import LoginRequest, Token, UserCreate, UserOut
from ..services import AuthService, get_auth_service


class AuthController:
    def __init__(self):
        self.router = APIRouter(prefix="/api/auth", tags=["auth"])
        self.register_routes()

    def register_routes(self):
        @self.router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
        async def register(user: UserCreate, auth_service: AuthService = Depends(get_auth_service)):
            return await auth_service.register_user(user)

        @self.router.post("/login", response_model=Token)
        async def login(data: LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
            return await auth_service.login_user(data.email, data.password)

    def get_router(self):
        return self.router
