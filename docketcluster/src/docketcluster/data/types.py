from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

NOISE_LABEL = -1

ASSIGNMENT_COLUMNS = ['docid', 'cluster', 'membership_prob', 'outlier_scores']


class Document(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    docid: str
    text_data: str = ''
    dupe_count: Optional[int] = None
    level_0: Optional[str] = None
    is_astroturf: Optional[bool] = None

    @field_validator('docid', mode='before')
    @classmethod
    def coerce_docid(cls, value: object) -> str:
        if value is None:
            raise ValueError('docid is required')
        return str(value)

    @field_validator('text_data', mode='before')
    @classmethod
    def default_text(cls, value: Optional[str]) -> str:
        return value or ''


class NgramCell(BaseModel):
    model_config = ConfigDict(frozen=True)

    docid: str
    gram: str
    count: int = Field(ge=0)
    weight: float = Field(ge=0.0)


class ClusterAssignment(BaseModel):
    model_config = ConfigDict(frozen=True)

    docid: str
    cluster: int
    membership_prob: float = Field(ge=0.0, le=1.0)
    outlier_score: float = Field(ge=0.0)

    @field_validator('docid', mode='before')
    @classmethod
    def coerce_docid(cls, value: object) -> str:
        return str(value)

    @property
    def is_noise(self) -> bool:
        return self.cluster == NOISE_LABEL


__all__ = ['Document', 'NgramCell', 'ClusterAssignment', 'NOISE_LABEL', 'ASSIGNMENT_COLUMNS']
