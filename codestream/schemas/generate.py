from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from codestream.core import config


class GenerateRequest(BaseModel):
    # clients send camelCase; python code reads snake_case
    model_config = ConfigDict(populate_by_name=True)

    prompt: Optional[str] = None
    model: str = Field(default=config.DEFAULT_MODEL)
    system_prompt: Optional[str] = Field(default=None, alias="systemPrompt")
    file_contents: Optional[str] = Field(default=None, alias="fileContents")
    is_edit: bool = Field(default=False, alias="isEdit")
    temperature: float = Field(default=config.TEMPERATURE)


# --------- SSE events, one JSON object per `data:` frame ---------

class TextEvent(BaseModel):
    type: Literal["text"] = "text"
    content: str


class PackageEvent(BaseModel):
    type: Literal["package"] = "package"
    name: str
    message: str


class CompleteEvent(BaseModel):
    type: Literal["complete"] = "complete"
    response: str
    packages: List[str]
    message: str


class ErrorEvent(BaseModel):
    type: Literal["error"] = "error"
    error: str


class ConversationAction(BaseModel):
    action: str
