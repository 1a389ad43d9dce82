from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class RenderRequest(BaseModel):
    # time fields accept seconds (number) or "HH:MM:SS" and are checked by
    # services.timecode, so the raw JSON value is kept as-is here
    model_config = ConfigDict(populate_by_name=True)

    google_access_token: Optional[str] = Field(None, alias="googleAccessToken")
    source_video_file_id: Optional[str] = Field(None, alias="sourceVideoFileId")
    start: Any = None
    duration: Any = None
    output_name: Optional[str] = Field(None, alias="outputName")
    drive_output_folder_id: Optional[str] = Field(None, alias="driveOutputFolderId")

    music_file_id: Optional[str] = Field(None, alias="musicFileId")
    music_start: Any = Field(None, alias="musicStart")
    music_volume: Optional[float] = Field(None, alias="musicVolume")
    video_volume: Optional[float] = Field(None, alias="videoVolume")


class RenderResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    uploaded_file_id: str = Field(alias="uploadedFileId")
    web_view_link: Optional[str] = Field(None, alias="webViewLink")
    web_content_link: Optional[str] = Field(None, alias="webContentLink")


class ErrorResponse(BaseModel):
    ok: bool = False
    error: str


class HealthResponse(BaseModel):
    ok: bool = True
