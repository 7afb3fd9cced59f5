from fastapi.security import OAuth2PasswordBearer

# Bearer token from the Authorization header; get_current_user raises the 401
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)
