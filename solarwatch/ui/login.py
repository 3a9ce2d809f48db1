"""Admin sign-in form with the optional security question step."""

import logging

from solarwatch.client.api import LoginFailed, SecurityAnswerRequired
from solarwatch.client.errors import ApiError, NetworkError
from solarwatch.schemas.admin import SessionUser

logger = logging.getLogger(__name__)

MISSING_CREDENTIALS = "Username and password are required."
MISSING_ANSWER = "Security answer is required."
NETWORK_FAILURE = "Login failed due to a network error."

# The answer box is rendered like a password field
ANSWER_INPUT_TYPE = "password"


class LoginFlow:
    def __init__(self, api):
        self.api = api
        self.username = ""
        self.password = ""
        self.security_answer = ""
        self.needs_security = False
        self.question_text = ""
        self.error: str | None = None
        self.loading = False
        self.user: SessionUser | None = None

    @property
    def logged_in(self) -> bool:
        return self.user is not None

    def _clear_challenge(self) -> None:
        self.needs_security = False
        self.question_text = ""
        self.security_answer = ""

    async def submit(self) -> bool:
        self.error = None

        if not self.username or not self.password:
            self.error = MISSING_CREDENTIALS
            return False

        if self.needs_security and not self.security_answer.strip():
            self.error = MISSING_ANSWER
            return False

        answer = self.security_answer if self.needs_security and self.security_answer else None

        self.loading = True
        try:
            result = await self.api.login(self.username, self.password, answer)
        except NetworkError as exc:
            logger.warning("Admin login error: %s", exc.message)
            self.error = NETWORK_FAILURE
            return False
        except ApiError as exc:
            self.error = exc.message
            return False
        finally:
            self.loading = False

        if isinstance(result, SecurityAnswerRequired):
            was_challenged = self.needs_security
            self.needs_security = True
            self.question_text = result.question_text
            self.error = result.message if was_challenged else None
            return False

        if isinstance(result, LoginFailed):
            self.error = result.message
            return False

        self.user = result.user
        self.password = ""
        self._clear_challenge()
        return True

    async def logout(self) -> None:
        await self.api.logout()
        self.user = None
        self.password = ""
        self._clear_challenge()
