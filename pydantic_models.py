from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator
from typing import List


class AnalysisRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    symptoms: List[StrictStr] = Field(min_length=1)
    additional_info: StrictStr = Field(alias="additionalInfo")

    @field_validator("symptoms")
    @classmethod
    def no_blank_symptoms(cls, v):
        if any(not s.strip() for s in v):
            raise ValueError("symptoms must not contain empty entries")
        return v


class AnalysisSections(BaseModel):
    assessment: str = ""
    recommendations: str = ""
    urgency: str = ""
    disclaimer: str = ""


class FormattedResponse(BaseModel):
    cleaned_text: str
    sections: AnalysisSections


class AnalysisResponse(BaseModel):
    analysis: str
    structured: AnalysisSections
    critical: bool
    timestamp: str
