from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str = ""
    password: str = ""
    security_answer: str | None = Field(None, alias="securityAnswer")


class SessionUser(BaseModel):
    """The account bound to a session cookie."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    username: str
    is_protected: bool = False
    security_question_id: int | None = Field(None, alias="securityQuestionId")


class LoginSuccess(BaseModel):
    success: bool = True
    user: SessionUser


class SecurityChallenge(BaseModel):
    """Returned with 400 when the password was right but an answer is still needed."""

    model_config = ConfigDict(populate_by_name=True)

    error: str = "Security answer required."
    requires_security_answer: bool = Field(True, alias="requiresSecurityAnswer")
    security_question_id: int = Field(alias="securityQuestionId")
    security_question_text: str | None = Field(None, alias="securityQuestionText")


class SecurityQuestionRow(BaseModel):
    id: int
    question_text: str

    model_config = {"from_attributes": True}


class AdminUserRow(BaseModel):
    id: int
    username: str
    is_protected: bool
    security_question_id: int | None = None

    model_config = {"from_attributes": True}


class AccountChanges(BaseModel):
    """Partial account update. An explicit null security question clears it."""

    model_config = ConfigDict(populate_by_name=True)

    password: str | None = None
    security_question_id: int | None = Field(None, alias="securityQuestionId")
    security_answer: str | None = Field(None, alias="securityAnswer")


class AdminUserCreate(AccountChanges):
    username: str = ""
