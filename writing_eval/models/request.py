from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Literal

ExamLevel = Literal["CAE", "CPE"]
TaskType = Literal["Essay", "Proposal", "Report", "Review", "Letter"]


class AnalysisRequest(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "examLevel": "CAE",
                "taskType": "Essay",
                "writing": "Nowadays, more and more people are choosing to work from home. In this essay I will discuss ...",
            }
        },
    )

    exam_level: ExamLevel = Field(alias="examLevel")
    task_type: TaskType = Field(alias="taskType")
    writing: str = Field(description="The student's writing sample")

    @field_validator("writing")
    @classmethod
    def validate_writing(cls, v: str) -> str:
        """Reject empty submissions; length and language checks happen in pre_process"""
        if not v or not v.strip():
            raise ValueError("Writing cannot be empty")
        return v
