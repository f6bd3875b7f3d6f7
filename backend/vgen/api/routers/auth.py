# vgen/api/routers/auth.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel, EmailStr, Field, field_validator

from vgen.api.deps import (
    auth_rate_limit,
    client_ip,
    get_current_user,
    get_store,
    handle_failures,
    token_from_request,
)
from vgen.core.security import (
    create_access_token,
    generate_reset_token,
    hash_password,
    hash_token,
    parse_duration,
    verify_password,
)
from vgen.models import Preferences, User, UserSession, utcnow
from vgen.storage.base import Store

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/auth", tags=["auth"])

RESET_MESSAGE = "If an account with that email exists, a password reset link has been sent."


class RegisterIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    firstName: str = Field(min_length=1, max_length=50)
    lastName: str = Field(min_length=1, max_length=50)

    @field_validator("firstName", "lastName", mode="before")
    @classmethod
    def _trim(cls, v):
        return v.strip() if isinstance(v, str) else v


class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class ProfileIn(BaseModel):
    firstName: str | None = Field(default=None, min_length=1, max_length=50)
    lastName: str | None = Field(default=None, min_length=1, max_length=50)
    bio: str | None = None
    location: str | None = None
    website: str | None = None
    linkedin: str | None = None
    github: str | None = None
    preferences: dict | None = None


class ForgotPasswordIn(BaseModel):
    email: EmailStr


class ResetPasswordIn(BaseModel):
    password: str = Field(min_length=6)


def _set_auth_cookie(request: Request, response: Response, token: str) -> None:
    settings = request.app.state.settings
    response.set_cookie(
        "accessToken",
        token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        max_age=int(parse_duration(settings.jwt_expire).total_seconds()),
    )


@router.post("/register", status_code=status.HTTP_201_CREATED, dependencies=[Depends(auth_rate_limit)])
async def register(body: RegisterIn, store: Store = Depends(get_store)):
    """
    Register a new user account.

    The email is stored lowercase and the password hashed with argon2.

    Args:
        body: email, password (6+ chars), firstName and lastName (1-50 chars)

    Returns:
        dict: {"success": True, "message": ..., "data": {"user": {...}, "token": str}}

    Raises:
        HTTPException (400): Email already registered
        HTTPException (429): Too many attempts from this IP
    """
    with handle_failures("Registration failed. Please try again."):
        email = body.email.lower()
        if await store.users.get_by_email(email):
            raise HTTPException(status_code=400, detail="User already exists with this email address")
        user = await store.users.create(User(
            email=email,
            password_hash=hash_password(body.password),
            first_name=body.firstName,
            last_name=body.lastName,
        ))
        token = create_access_token(user.id, user.role)
        logger.info("[auth] Registered user id=%s", user.id)
        return {
            "success": True,
            "message": "User registered successfully",
            "data": {"user": user.to_public(), "token": token},
        }


@router.post("/login", dependencies=[Depends(auth_rate_limit)])
async def login(body: LoginIn, request: Request, response: Response, store: Store = Depends(get_store)):
    """
    Authenticate and issue an access token.

    On success the last login time is updated, a session row (hashed token)
    is recorded and the token is set as the HttpOnly "accessToken" cookie.

    Raises:
        HTTPException (401): Wrong email or password, or deactivated account
        HTTPException (429): Too many attempts from this IP
    """
    with handle_failures("Login failed. Please try again."):
        user = await store.users.get_by_email(body.email.lower())
        if not user or not verify_password(body.password, user.password_hash):
            raise HTTPException(status_code=401, detail="Invalid email or password")
        if not user.is_active:
            raise HTTPException(status_code=401, detail="Account has been deactivated. Please contact support.")

        user.last_login = utcnow()
        user = await store.users.save(user)

        token = create_access_token(user.id, user.role)
        settings = request.app.state.settings
        await store.sessions.create(UserSession(
            user_id=user.id,
            session_token=hash_token(token),
            expires_at=utcnow() + parse_duration(settings.jwt_expire),
            user_agent=request.headers.get("user-agent"),
            ip_address=client_ip(request),
        ))
        _set_auth_cookie(request, response, token)
        return {
            "success": True,
            "message": "Login successful",
            "data": {"user": user.to_public(), "token": token},
        }


@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    """Current user profile."""
    return {"success": True, "data": {"user": user.to_public()}}


@router.put("/me")
async def update_me(body: ProfileIn, user: User = Depends(get_current_user), store: Store = Depends(get_store)):
    """
    Update the profile of the current user.

    Only the profile fields are writable; email, role, subscription and
    credentials are ignored even if sent.
    """
    with handle_failures("Failed to update profile"):
        changes = body.model_dump(exclude_unset=True, exclude_none=True)
        for key, field in (
            ("firstName", "first_name"),
            ("lastName", "last_name"),
            ("bio", "bio"),
            ("location", "location"),
            ("website", "website"),
            ("linkedin", "linkedin"),
            ("github", "github"),
        ):
            if key in changes:
                setattr(user, field, changes[key])
        if "preferences" in changes:
            merged = {**user.preferences.model_dump(by_alias=True), **changes["preferences"]}
            user.preferences = Preferences.model_validate(merged)
        user = await store.users.save(user)
        return {"success": True, "message": "Profile updated successfully", "data": {"user": user.to_public()}}


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """
    Log out: remove the session row for this token and clear the cookie.

    The JWT itself stays valid until it expires.
    """
    with handle_failures("Logout failed"):
        token = token_from_request(request, request.headers.get("authorization"))
        if token:
            await store.sessions.delete_by_token(hash_token(token))
        response.delete_cookie("accessToken")
        return {"success": True, "message": "Logout successful"}


@router.get("/usage")
async def usage(user: User = Depends(get_current_user), store: Store = Depends(get_store)):
    """Monthly quota for the current user (the window is refreshed first)."""
    with handle_failures("Failed to retrieve usage information"):
        if user.refresh_usage_window():
            user = await store.users.save(user)
        sub = user.subscription
        return {
            "success": True,
            "data": {
                "usage": {
                    "current": sub.usage_count,
                    "limit": sub.monthly_limit,
                    "resetDate": sub.reset_date.isoformat(),
                    "canMakeRequest": user.can_make_request(),
                    "plan": sub.plan,
                },
            },
        }


@router.post("/forgot-password")
async def forgot_password(body: ForgotPasswordIn, request: Request, store: Store = Depends(get_store)):
    """
    Start a password reset.

    The response is identical whether or not the email is registered. For a
    known user the sha256 of a fresh token is stored (valid 10 minutes) and
    the reset link is logged; no mail is sent.
    """
    with handle_failures("Failed to process password reset request"):
        user = await store.users.get_by_email(body.email.lower())
        if user:
            raw, hashed, expires = generate_reset_token()
            user.password_reset_token = hashed
            user.password_reset_expires = expires
            await store.users.save(user)
            frontend = request.app.state.settings.frontend_url.rstrip("/")
            logger.info("[auth] Password reset link for %s: %s/reset-password/%s", user.email, frontend, raw)
        return {"success": True, "message": RESET_MESSAGE}


@router.post("/reset-password/{token}")
async def reset_password(token: str, body: ResetPasswordIn, store: Store = Depends(get_store)):
    """
    Finish a password reset with the raw token from the reset link.

    Raises:
        HTTPException (400): Unknown or expired token
    """
    with handle_failures("Failed to reset password"):
        now = utcnow()
        candidates = await store.users.find_by_reset_token(hash_token(token))
        user = next((u for u in candidates if u.reset_token_valid(now)), None)
        if user is None:
            raise HTTPException(status_code=400, detail="Invalid or expired reset token")
        user.password_hash = hash_password(body.password)
        user.clear_reset_token()
        await store.users.save(user)
        logger.info("[auth] Password reset for user id=%s", user.id)
        return {"success": True, "message": "Password reset successful"}
