from fastapi import APIRouter, Depends
from sqlmodel import Session, select
from storefront.database import get_session
from storefront.exceptions import AuthenticationError, ValidationError
from storefront.models.user import User
from storefront.schemas.user_schemas import UserRegister, UserLogin, Token, UserResponse
from storefront.utils.hash import hash_password, verify_password
from storefront.utils.token import create_access_token


router = APIRouter()


@router.post("/register", response_model=UserResponse)
def register_user(payload: UserRegister, session: Session = Depends(get_session)):
    existing_user = session.exec(select(User).where(User.email == payload.email)).first()
    if existing_user:
        raise ValidationError("Email already registered")

    user = User(
        full_name=payload.full_name,
        mobile_number=payload.mobile_number,
        email=payload.email,
        password=hash_password(payload.password),
    )

    session.add(user)
    session.commit()
    session.refresh(user)

    return UserResponse(
        message="Registration successful.",
        user_id=user.id,
        email=user.email,
        role=user.role,
        can_login=user.can_login,
    )


@router.post("/login", response_model=Token)
def login(payload: UserLogin, session: Session = Depends(get_session)):
    user = session.exec(select(User).where(User.email == payload.email)).first()

    if not user or not verify_password(payload.password, user.password):
        raise AuthenticationError("Invalid email or password")

    token = create_access_token({"user_id": user.id})
    return Token(access_token=token, token_type="bearer")
