from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from solarwatch.models.base import Base


class SecurityQuestion(Base):
    __tablename__ = "security_questions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    question_text: Mapped[str] = mapped_column(Text, nullable=False)


class AdminUser(Base):
    """An admin account. Protected accounts cannot be edited or deleted through the API."""

    __tablename__ = "admin_users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    is_protected: Mapped[bool] = mapped_column(Boolean, default=False)

    # Question and answer hash are set together
    security_question_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("security_questions.id", ondelete="SET NULL")
    )
    security_answer_hash: Mapped[str | None] = mapped_column(Text)

    security_question: Mapped["SecurityQuestion | None"] = relationship(lazy="joined")
