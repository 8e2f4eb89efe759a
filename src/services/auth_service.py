"""
Authentication service for registration, login and Google sign-in.

This module provides:
- User registration with email/password (creates "My Workspace")
- User login with JWT token generation
- Google sign-in (ID token or access token), account linking and
  acceptance of pending workspace invitations
"""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.security import hash_password, issue_access_token, verify_password
from src.exceptions import AlreadyExistsError, InvalidCredentialsError, InvalidInputError
from src.integrations.google_identity import GoogleIdentity, GoogleIdentityClient
from src.models.enums import AuthProvider
from src.models.user import User
from src.repositories.shared_user_repository import SharedUserRepository
from src.repositories.user_repository import UserRepository
from src.repositories.workspace_repository import WorkspaceMemberRepository
from src.schemas.auth import GoogleAuthRequest, LoginRequest, RegisterRequest
from src.services.workspace_service import WorkspaceService

logger = logging.getLogger(__name__)


class AuthService:
    """
    Service class for authentication operations.

    This service handles:
    - User registration
    - Login and token generation
    - Google sign-in with invitation binding

    All methods require an active database session.
    """

    def __init__(
        self,
        session: AsyncSession,
        google_client: GoogleIdentityClient | None = None,
    ):
        """
        Initialize AuthService.

        Args:
            session: Async database session
            google_client: Verifier for Google credentials
        """
        self.session = session
        self.user_repo = UserRepository(session)
        self.member_repo = WorkspaceMemberRepository(session)
        self.shared_user_repo = SharedUserRepository(session)
        self.workspace_service = WorkspaceService(session)
        self.google_client = google_client or GoogleIdentityClient()

    @staticmethod
    def issue_token(user: User) -> str:
        """Create the access token carried as ``Authorization: Bearer``."""
        return issue_access_token(user.id, user.email)

    async def register(self, data: RegisterRequest) -> tuple[User, str]:
        """
        Register a new local user.

        This method:
        1. Rejects an e-mail already in use
        2. Hashes the password with Argon2id
        3. Creates the user and the default "My Workspace"
        4. Issues an access token

        Args:
            data: Registration data (e-mail already lowercased)

        Returns:
            Tuple of (User, access token)

        Raises:
            AlreadyExistsError: If the e-mail is already registered
        """
        if await self.user_repo.email_exists(data.email):
            logger.warning(f"Registration attempted with existing email: {data.email}")
            raise AlreadyExistsError(message="User with this email already exists")

        try:
            user = await self.user_repo.create(
                email=data.email,
                password_hash=hash_password(data.password),
                full_name=data.full_name or "",
                auth_provider=AuthProvider.local.value,
            )
            await self.workspace_service.create_default_workspace(user)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise AlreadyExistsError(message="User with this email already exists") from e

        logger.info(f"User registered successfully: {user.id} ({user.email})")
        return user, self.issue_token(user)

    async def login(self, data: LoginRequest) -> tuple[User, str]:
        """
        Authenticate with e-mail and password.

        Unknown e-mail and wrong password fail identically.

        Returns:
            Tuple of (User, access token)

        Raises:
            InvalidCredentialsError: "Invalid email or password"
        """
        user = await self.user_repo.get_by_email(data.email)
        if not user:
            logger.warning(f"Login failed: user not found with email {data.email}")
            raise InvalidCredentialsError()

        if not verify_password(data.password, user.password_hash):
            logger.warning(f"Login failed: invalid password for user {user.id}")
            raise InvalidCredentialsError()

        await self.user_repo.update_last_login(user)
        await self.session.commit()

        logger.info(f"User logged in successfully: {user.id} ({user.email})")
        return user, self.issue_token(user)

    async def google_login(self, data: GoogleAuthRequest) -> tuple[User, str, bool]:
        """
        Sign in with Google.

        This method:
        1. Verifies the credential with Google (never trusts client profile)
        2. Finds the user by e-mail, or creates one with "My Workspace"
        3. Links Google id, avatar and name to an existing account if unset
        4. Accepts every pending invitation for the verified e-mail

        Returns:
            Tuple of (User, access token, is_first_login)

        Raises:
            InvalidInputError: Neither credential nor access token supplied
            AuthenticationError: Google rejected the credential
        """
        if data.credential:
            identity = await self.google_client.verify_id_token(data.credential, data.client_id)
        elif data.access_token:
            identity = await self.google_client.verify_access_token(data.access_token)
        else:
            raise InvalidInputError(
                field="credential",
                message="Google credential or access token is required",
            )

        user = await self.user_repo.get_by_email(identity.email)
        if user is None:
            user = await self._create_google_user(identity)
            is_first_login = True
        else:
            is_first_login = self._link_google_account(user, identity)

        await self.user_repo.update_last_login(user)
        await self.session.commit()

        await self._accept_pending_invitations(user)

        logger.info(f"Google sign-in: {user.id} ({user.email}), first_login={is_first_login}")
        return user, self.issue_token(user), is_first_login

    async def _create_google_user(self, identity: GoogleIdentity) -> User:
        user = await self.user_repo.create(
            email=identity.email,
            password_hash=None,
            full_name=identity.name or "",
            google_id=identity.google_id,
            avatar=identity.picture,
            auth_provider=AuthProvider.google.value,
            is_first_login=True,
        )
        await self.workspace_service.create_default_workspace(user)
        logger.info(f"Created account from Google sign-in: {user.id}")
        return user

    @staticmethod
    def _link_google_account(user: User, identity: GoogleIdentity) -> bool:
        """Fill Google fields left empty and clear the first-login flag."""
        is_first_login = user.is_first_login is True

        if not user.google_id:
            user.google_id = identity.google_id
            if identity.picture and not user.avatar:
                user.avatar = identity.picture
            if identity.name and not user.full_name:
                user.full_name = identity.name

        if is_first_login:
            user.is_first_login = False
        return is_first_login

    async def _accept_pending_invitations(self, user: User) -> None:
        """Bind pending workspace invitations and legacy shares; never fails the sign-in."""
        try:
            accepted = await self.member_repo.bind_pending_invitations(user.email, user.id)
            accepted += await self.shared_user_repo.accept_pending_for_email(user.email)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Accepting invitations for {user.email} failed: {e}")
            return

        if accepted:
            logger.info(f"Accepted {accepted} pending invitation(s) for {user.email}")
