####################################
# --- Request/response schemas --- #
####################################

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class FileContentRequest(BaseModel):
    """Request body for `POST /files` and `PUT /files/:filename`.

    `text` is optional at the schema level so that a missing value is reported
    as a 400 by the route rather than a schema error.
    """
    text: Optional[str] = Field(
        None,
        description="The UTF-8 text to store.",
        json_schema_extra={"example": "hello"},
    )
    tags: Optional[List[str]] = Field(
        None,
        description="Labels to attach to the file.",
        json_schema_extra={"example": ["notes", "draft"]},
    )


class FileEntry(BaseModel):
    """A stored file and its tags."""
    filename: str = Field(
        description="The key of the file in the bucket.",
        json_schema_extra={"example": "1718000000000.txt"},
    )
    tags: List[str] = Field(default_factory=list)


class GetFilesResponse(BaseModel):
    """Response model for `GET /files`.

    Entries are bare filenames when tags are disabled.
    """
    files: List[Union[FileEntry, str]]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "files": [
                    {"filename": "1718000000000.txt", "tags": ["notes"]},
                ]
            }
        }
    )


class PostFileResponse(BaseModel):
    """Response model for `POST /files`."""
    filename: str
    tags: Optional[List[str]] = None


class GetFileResponse(BaseModel):
    """Response model for `GET /files/:filename`."""
    content: str
    tags: Optional[List[str]] = None


class PutFileResponse(BaseModel):
    """Response model for `PUT /files/:filename`."""
    filename: str
    message: str = Field(description="A message about the operation.")
    tags: Optional[List[str]] = None


class DeleteFileResponse(BaseModel):
    """Response model for `DELETE /files/:filename`."""
    message: str


class SearchResponse(BaseModel):
    """Response model for `GET /search`."""
    filenames: List[str]


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx response."""
    error: str


class HealthResponse(BaseModel):
    """Response model for `GET /health`."""
    status: str
    components: dict
