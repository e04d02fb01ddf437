# blobcheck/schemas/uploads.py
from pydantic import BaseModel, ConfigDict, Field


class HealthOut(BaseModel):
    status: str
    timestamp: str
    message: str


class UploadedFileOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    filename: str
    size: int
    mimetype: str
    uploaded_at: str = Field(alias="uploadedAt")


class UploadOut(BaseModel):
    success: bool = True
    message: str
    file: UploadedFileOut


class ErrorOut(BaseModel):
    error: str
    message: str | None = None
