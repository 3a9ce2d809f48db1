from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from solarwatch.models.base import Base


class AboutSection(Base):
    """One block of the About page, rendered by display_order."""

    __tablename__ = "about_sections"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)


class TeamMember(Base):
    __tablename__ = "team_members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    role: Mapped[str] = mapped_column(String(200), nullable=False)
    image_url: Mapped[str | None] = mapped_column(Text)
