from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator
from typing import Annotated, FrozenSet, List, Literal, Optional, Union

# unified diff marker for a path that does not exist on that side
DELETED_PATH = "/dev/null"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class ContextLine(_Frozen):
    kind: Literal["context"] = "context"
    content: str
    source_line_no: int
    target_line_no: int

    @property
    def marker(self) -> str:
        return " "


class AddedLine(_Frozen):
    kind: Literal["added"] = "added"
    content: str
    target_line_no: int

    @property
    def marker(self) -> str:
        return "+"


class RemovedLine(_Frozen):
    kind: Literal["removed"] = "removed"
    content: str
    source_line_no: int

    @property
    def marker(self) -> str:
        return "-"


Change = Annotated[Union[ContextLine, AddedLine, RemovedLine], Field(discriminator="kind")]

EligibleLineSet = FrozenSet[int]


class DiffHunk(_Frozen):
    source_start: int
    source_length: int
    target_start: int
    target_length: int
    header: str
    content: str
    changes: List[Change]


class DiffFile(_Frozen):
    path_before: str
    path_to: str
    hunks: List[DiffHunk]

    @property
    def is_deleted(self) -> bool:
        return self.path_to == DELETED_PATH


class PRContext(_Frozen):
    owner: str
    repo: str
    pull_number: int
    title: str = ""
    description: str = ""


class AIReviewEntry(BaseModel):
    # StrictInt keeps JSON booleans from passing as line 1/0
    lineNumber: Union[StrictInt, str]
    reviewComment: str


class ReviewSuccess(BaseModel):
    ok: Literal[True] = True
    entries: List[AIReviewEntry]


class ReviewFailure(BaseModel):
    ok: Literal[False] = False
    reason: str


ReviewResult = Union[ReviewSuccess, ReviewFailure]


class ReviewComment(_Frozen):
    path: str
    line: int
    body: str
    # LEFT anchors on the old file (removed lines), RIGHT on the new one
    side: Literal["LEFT", "RIGHT"] = "RIGHT"


class ReviewResponse(BaseModel):
    review_summary: str
    comments: List[ReviewComment]


class RepositoryOwner(BaseModel):
    login: str


class RepositoryRef(BaseModel):
    owner: RepositoryOwner
    name: str

    @field_validator("owner", mode="before")
    @classmethod
    def _owner_from_login(cls, value):
        if isinstance(value, str):
            return {"login": value}
        return value


class TriggerEvent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    action: str
    repository: RepositoryRef
    number: int
    before: Optional[str] = None
    after: Optional[str] = None
