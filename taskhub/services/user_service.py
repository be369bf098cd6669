# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Business logic for accounts: registration, login, password resets, token resolution."""
from typing import Any, Dict

from pymongo.errors import DuplicateKeyError

from taskhub.core.errors import AuthError, BadRequestError, ConflictError, ForbiddenError, NotFoundError
from taskhub.core.logging import get_logger
from taskhub.core.security import create_access_token, decode_access_token, hash_password, verify_password
from taskhub.metrics import LOGINS, USERS_REGISTERED
from taskhub.models.user import ROLE_USER, User
from taskhub.repositories.user_repository import UserRepository
from taskhub.services.dto import page_dto, user_dto

logger = get_logger(__name__)


class UserService:
    def __init__(self, repo: UserRepository):
        self._repo = repo

    def register(self, name: str, email: str, password: str) -> Dict[str, Any]:
        return user_dto(self.create_account(name, email, password, ROLE_USER, source="self"))

    def create_account(self, name: str, email: str, password: str, role: str,
                       must_reset_password: bool = False, source: str = "self") -> Dict[str, Any]:
        """Insert a new account; raises ConflictError when the email is taken."""
        if self._repo.find_by_email(email):
            raise ConflictError("Email is already registered.")
        user = User(
            _id=None, name=name, email=email.strip().lower(),
            password=hash_password(password), role=role,
            mustResetPassword=must_reset_password,
        )
        try:
            doc = self._repo.create(user)
        except DuplicateKeyError:
            raise ConflictError("Email is already registered.")
        USERS_REGISTERED.labels(source=source).inc()
        logger.info("Account created id=%s role=%s source=%s", doc["_id"], role, source)
        return doc

    def login(self, email: str, password: str) -> Dict[str, Any]:
        user = self._repo.find_by_email(email)
        if not user or not verify_password(password, user["password"]):
            LOGINS.labels(outcome="failed").inc()
            raise AuthError("Invalid email or password.")

        if user.get("mustResetPassword"):
            LOGINS.labels(outcome="reset_required").inc()
            logger.info("Login blocked pending password reset id=%s", user["_id"])
            return {"mustResetPassword": True, "email": user["email"]}

        token = create_access_token({"id": str(user["_id"]), "email": user["email"], "role": user["role"]})
        LOGINS.labels(outcome="success").inc()
        return {"token": token, "user": user_dto(user), "mustResetPassword": False}

    def reset_password(self, email: str, new_password: str) -> Dict[str, Any]:
        """Complete the first-login reset of an admin-created account."""
        user = self._repo.find_by_email(email)
        if not user:
            raise NotFoundError("User not found")
        if not user.get("mustResetPassword"):
            raise BadRequestError("No password reset is pending for this account.")
        updated = self._repo.update_password(user["_id"], hash_password(new_password))
        logger.info("Initial password reset completed id=%s", user["_id"])
        return user_dto(updated)

    def change_password(self, user: Dict[str, Any], current_password: str,
                        new_password: str) -> Dict[str, Any]:
        if not verify_password(current_password, user["password"]):
            raise AuthError("Current password is incorrect.")
        updated = self._repo.update_password(user["_id"], hash_password(new_password))
        logger.info("Password changed id=%s", user["_id"])
        return user_dto(updated)

    def profile(self, user: Dict[str, Any]) -> Dict[str, Any]:
        return user_dto(user)

    def list_users(self, page: int, limit: int) -> Dict[str, Any]:
        total, docs = self._repo.list_users(page, limit)
        return page_dto([user_dto(d) for d in docs], total, page, limit)

    def user_from_token(self, token: str) -> Dict[str, Any]:
        """Resolve a bearer token to the current user document."""
        payload = decode_access_token(token)
        if payload is None:
            raise ForbiddenError("Invalid or expired token.")
        try:
            user = self._repo.find_by_id(payload["id"])
        except BadRequestError:
            raise ForbiddenError("Invalid or expired token.")
        if not user:
            raise AuthError("User no longer exists.")
        return user
