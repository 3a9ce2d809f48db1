from pydantic import BaseModel, ConfigDict, Field


class AboutSectionIn(BaseModel):
    display_order: int | None = None
    title: str | None = None
    text: str | None = None


class AboutSectionRow(BaseModel):
    id: int
    display_order: int
    title: str
    text: str

    model_config = {"from_attributes": True}


class TeamMemberIn(BaseModel):
    name: str | None = None
    role: str | None = None
    image_url: str | None = None


class TeamMemberRow(BaseModel):
    id: int
    name: str
    role: str
    image_url: str | None = None

    model_config = {"from_attributes": True}


class TeamPhotoUpload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_data: str | None = Field(None, alias="imageData")


class TeamPhotoResult(BaseModel):
    success: bool = True
    image_url: str
