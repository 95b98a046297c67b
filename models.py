from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Literal, Optional

DEV_NULL = "/dev/null"


class DiffLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: str
    kind: Literal["added", "removed", "context"]
    new_line_no: Optional[int] = None
    old_line_no: Optional[int] = None

    @property
    def marker(self) -> str:
        return {"added": "+", "removed": "-", "context": " "}[self.kind]

    @property
    def line_no(self) -> Optional[int]:
        # new-file coordinate, old-file only for removed lines
        return self.new_line_no if self.new_line_no is not None else self.old_line_no


class DiffHunk(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_start: int
    source_length: int
    target_start: int
    target_length: int
    section_header: str = ""
    changes: List[DiffLine] = Field(default_factory=list)

    @property
    def header(self) -> str:
        header = "@@ -%d,%d +%d,%d @@" % (
            self.source_start, self.source_length, self.target_start, self.target_length
        )
        if self.section_header:
            header += " " + self.section_header
        return header

    @property
    def new_line_numbers(self) -> List[int]:
        return [c.new_line_no for c in self.changes if c.new_line_no is not None]


class DiffFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_path: str
    target_path: str
    hunks: List[DiffHunk] = Field(default_factory=list)

    @property
    def is_deleted(self) -> bool:
        return self.target_path == DEV_NULL

    @property
    def is_added(self) -> bool:
        return self.source_path == DEV_NULL

    @property
    def is_rename(self) -> bool:
        return not (self.is_added or self.is_deleted) and self.source_path != self.target_path

    @property
    def path(self) -> str:
        return self.source_path if self.is_deleted else self.target_path


class ReviewContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    pull_number: int
    title: str = ""
    description: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def url(self) -> str:
        return f"https://github.com/{self.owner}/{self.repo}/pull/{self.pull_number}"


class RawSuggestion(BaseModel):
    """One untrusted entry of the model's ``reviews`` array."""

    model_config = ConfigDict(populate_by_name=True)

    line_number: Any = Field(default=None, alias="lineNumber")
    review_comment: Any = Field(default=None, alias="reviewComment")


class Comment(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str = Field(min_length=1)
    line: int = Field(gt=0)
    body: str = Field(min_length=1)


class AnnotationResult(BaseModel):
    comments: List[Comment] = Field(default_factory=list)
    hunks_reviewed: int = 0
    hunks_failed: int = 0


class ReviewOutcome(BaseModel):
    event: str
    pull_number: Optional[int] = None
    files_reviewed: int = 0
    hunks_reviewed: int = 0
    hunks_failed: int = 0
    comments: List[Comment] = Field(default_factory=list)
    submitted: bool = False
    notified: bool = False
    skipped_reason: Optional[str] = None


class ReviewResponse(BaseModel):
    review_summary: str
    comments: List[Comment]


class _Owner(BaseModel):
    login: str


class _Repository(BaseModel):
    name: str
    owner: _Owner


class PullRequestEvent(BaseModel):
    """The fields of a GitHub ``pull_request`` event the reviewer reads."""

    action: str
    number: int
    repository: _Repository
    before: Optional[str] = None
    after: Optional[str] = None
