from __future__ import annotations
from datetime import datetime
from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class SubmissionCreate(BaseModel):
    # the bot still sends photo_file_id / file_path
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: int | None = None
    user_name: str | None = None
    server: str
    car: str
    price: int
    photo_reference: str = Field(validation_alias=AliasChoices("photo_reference", "photo_file_id"))
    file_path_hint: str | None = Field(default=None, validation_alias=AliasChoices("file_path_hint", "file_path"))


class SubmissionPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    user_name: str | None = None
    server: str
    car: str
    price: int
    photo_reference: str
    file_path_hint: str | None = None
    status: str
    created_at: datetime
    # served via the photo proxy; never a Bot API URL
    photo_url: str | None = None


class SubmissionCreated(BaseModel):
    message: str = "Submission received"
    id: int


class SubmissionList(BaseModel):
    message: str = "success"
    data: list[SubmissionPublic]


class ActionResult(BaseModel):
    success: bool = True
    deleted: bool | None = None
