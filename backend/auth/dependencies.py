from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from backend.auth import jwt_handler
from backend.auth.access import Caller
from backend.database import SessionLocal
from backend.models.instructor import Instructor
from backend.models.user import User, UserRole

security = HTTPBearer()


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> User:
    token = credentials.credentials
    try:
        payload = jwt_handler.decode_access_token(token)
    except Exception as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc

    email = payload.get("sub")
    if not email:
        raise HTTPException(status_code=401, detail="Invalid token subject")

    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == email).first()
    finally:
        db.close()
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")
    return user


def get_current_caller(user: User = Depends(get_current_user)) -> Caller:
    try:
        role = UserRole((user.role or "").strip().lower())
    except ValueError as exc:
        raise HTTPException(status_code=403, detail="Forbidden") from exc

    instructor_id = None
    db = SessionLocal()
    try:
        instructor = db.query(Instructor.id).filter(Instructor.user_id == user.id).first()
        if instructor is not None:
            instructor_id = instructor.id
    finally:
        db.close()

    return Caller(user_id=user.id, email=user.email, role=role, instructor_id=instructor_id)
