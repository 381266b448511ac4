# writing_eval/models/analysis.py
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, confloat, conint


class CriterionName(str, Enum):
    """Cambridge assessment scale categories, declared in canonical order."""
    CONTENT = "Content"
    COMMUNICATIVE_ACHIEVEMENT = "Communicative Achievement"
    ORGANISATION = "Organisation"
    LANGUAGE = "Language"

    @classmethod
    def lookup(cls, label: str) -> Optional["CriterionName"]:
        """Case-insensitive match on the display label ("communicative achievement" -> member)."""
        wanted = " ".join(label.split()).lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        return None

    @property
    def order(self) -> int:
        return list(CriterionName).index(self)


KNOWN_ERROR_TYPES = ("grammar", "spelling", "vocabulary", "style")


class Criterion(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: CriterionName
    score: Union[conint(ge=0, le=5), confloat(ge=0, le=5)]
    feedback: str


class ErrorAnnotation(BaseModel):
    """One flagged language problem; `start`/`end` are a half-open span into the submission."""
    text: str = ""
    correction: str = ""
    type: str = "style"
    explanation: str = ""
    start: Optional[int] = Field(default=None, ge=0)
    end: Optional[int] = Field(default=None, ge=0)

    @property
    def located(self) -> bool:
        return self.start is not None and self.end is not None


class AnalysisResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    overall_score: int = Field(alias="overallScore", ge=0, le=5)
    criteria: List[Criterion]
    errors: List[ErrorAnnotation] = Field(default_factory=list)

    def to_payload(self) -> dict:
        """JSON-ready dict with camelCase keys; unlocated errors carry no start/end."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
