from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import TypedDict
from langgraph.graph import MessagesState


class _ToolOutput(BaseModel):
    """Tool results serialise with the camelCase keys the agent sees."""

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


# ------------------------
# Gmail
# ------------------------


class EmailSummary(_ToolOutput):
    id: str
    thread_id: str = Field(alias="threadId")
    subject: str
    from_: str = Field(alias="from")
    date: str
    snippet: str
    labels: List[str] = Field(default_factory=list)


class EmailList(_ToolOutput):
    emails: List[EmailSummary] = Field(default_factory=list)
    total_count: int = Field(alias="totalCount")


class EmailContent(_ToolOutput):
    id: str
    thread_id: str = Field(alias="threadId")
    subject: str
    from_: str = Field(alias="from")
    to: str
    date: str
    body: str
    labels: List[str] = Field(default_factory=list)


class LabelResult(_ToolOutput):
    label_id: str = Field(alias="labelId")
    label_name: str = Field(alias="labelName")
    created: bool


class AddLabelResult(_ToolOutput):
    success: bool
    email_id: str = Field(alias="emailId")
    label_id: str = Field(alias="labelId")


class DraftResult(_ToolOutput):
    draft_id: str = Field(alias="draftId")
    thread_id: str = Field(alias="threadId")
    success: bool


# ------------------------
# Calendar
# ------------------------


class CalendarEventResult(_ToolOutput):
    event_id: str = Field(alias="eventId")
    html_link: str = Field(alias="htmlLink")
    summary: str
    success: bool


class CalendarEventSummary(_ToolOutput):
    id: str
    summary: str
    start: str
    end: str
    location: Optional[str] = None


class CalendarEventList(_ToolOutput):
    events: List[CalendarEventSummary] = Field(default_factory=list)
    total_count: int = Field(alias="totalCount")


# ------------------------
# Agent / workflow state
# ------------------------


class AgentState(MessagesState):
    # Number of llm_call turns taken so far, and the budget for them
    steps: int
    max_steps: int


class ProcessEmailsOutput(TypedDict):
    agent_response: str
    processed_at: str
    success: bool


class SummaryOutput(TypedDict):
    summary: str
    completed_at: str
    overall_success: bool


class WorkflowState(TypedDict, total=False):
    requested_at: str
    agent_response: str
    processed_at: str
    success: bool
    summary: str
    completed_at: str
    overall_success: bool


class WorkflowContext(TypedDict, total=False):
    """Runtime context propagated through LangGraph Runtime."""

    timezone: str
    thread_id: str | None
    max_steps: int
