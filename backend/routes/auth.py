# backend/routes/auth.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from database import get_db
from models.users import User, UserRole
from schemas import user as schemas
from schemas.common import MessageResponse
from services import users as users_service
from utils.audit import write_log
from utils.errors import ConflictError, UnauthenticatedError
from utils.permissions import permission_required
from utils.tokenJWT import create_access_token

router = APIRouter(prefix="/auth", tags=["Auth"])


def _auth_response(user) -> schemas.AuthResponse:
    token = create_access_token(user.id, user.role)
    return schemas.AuthResponse(access_token=token, user=schemas.UserOut.model_validate(user))


# Register a new account; the role is always NORMAL_USER
@router.post("/signup", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(payload: schemas.SignupRequest, request: Request, db: Session = Depends(get_db)):
    try:
        new_user = users_service.create_user(db, payload, role=UserRole.NORMAL_USER)
    except ConflictError:
        write_log(db, user_id=None, action="SIGNUP", resource="auth", status="FAIL",
                  request=request, meta={"email": payload.email})
        raise

    write_log(db, user_id=new_user.id, action="SIGNUP", resource="auth",
              request=request, meta={"email": new_user.email})
    return _auth_response(new_user)


# Authenticate user and issue JWT token
@router.post("/login", response_model=schemas.AuthResponse)
def login(payload: schemas.LoginRequest, request: Request, db: Session = Depends(get_db)):
    db_user = users_service.authenticate(db, payload.email, payload.password)

    # Validate credentials and log failure on error
    if db_user is None:
        write_log(db, user_id=None, action="LOGIN", resource="auth", status="FAIL",
                  request=request, meta={"email": payload.email})
        raise UnauthenticatedError("Invalid credentials")

    write_log(db, user_id=db_user.id, action="LOGIN", resource="auth",
              request=request, meta={"email": db_user.email})
    return _auth_response(db_user)


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    payload: schemas.ChangePasswordRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(permission_required("auth:change-password")),
):
    users_service.change_password(db, current_user, payload.old_password, payload.new_password)
    write_log(db, user_id=current_user.id, action="CHANGE_PASSWORD", resource="auth", request=request)
    return {"message": "Password changed successfully"}


# Retrieve current authenticated user details
@router.get("/profile", response_model=schemas.UserOut)
def profile(current_user: User = Depends(permission_required("auth:profile"))):
    return current_user
