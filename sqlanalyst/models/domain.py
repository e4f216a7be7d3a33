from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

QueryStatus = Literal["idle", "pending", "succeeded", "failed"]


class Session(BaseModel):
    user_id: str
    email: str
    valid: bool = True
    id_token: Optional[str] = Field(default=None, exclude=True)


class QueryRequest(BaseModel):
    """One natural-language question plus fixed routing metadata."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    prompt: str
    type: str = "postgres"
    connection_id: str = Field(alias="connectionID")

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class QueryOutcome(BaseModel):
    status: QueryStatus = "idle"
    payload: Optional[Any] = None
    message: Optional[str] = None

    @classmethod
    def pending(cls) -> "QueryOutcome":
        return cls(status="pending")

    @classmethod
    def success(cls, payload: Any) -> "QueryOutcome":
        return cls(status="succeeded", payload=payload)

    @classmethod
    def failure(cls, message: str) -> "QueryOutcome":
        return cls(status="failed", message=message)


class Message(BaseModel):
    kind: Literal["system", "user", "ai"]
    content: str


# --- API I/O ---
class Credentials(BaseModel):
    email: str
    password: str


class PasswordResetRequest(BaseModel):
    email: str


class SessionResponse(BaseModel):
    authenticated: bool
    session: Optional[Session] = None


class PromptRequest(BaseModel):
    prompt: str


class OutcomeResponse(BaseModel):
    status: QueryStatus
    payload: Optional[Any] = None
    message: Optional[str] = None
    rendered: str = ""


class FileSelection(BaseModel):
    filename: str


class WorkspaceView(BaseModel):
    filename: Optional[str] = None
    is_uploading: bool = False
    is_sending: bool = False
    messages: List[Message] = []
