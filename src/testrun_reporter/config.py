from pydantic import BaseModel, Field, field_validator
from typing import Optional
import yaml, pathlib

DEFAULT_DURATION_THRESHOLD = 100

class ReporterConfig(BaseModel):
    duration_threshold: int = Field(DEFAULT_DURATION_THRESHOLD, description="Show test durations above this many ms")
    watching: bool = Field(False, description="Reporting for a watch-mode session")
    project_dir: str = Field(".", description="File paths are shown relative to this directory")
    columns: Optional[int] = Field(None, description="Override the report stream's terminal width")
    color: Optional[bool] = Field(None, description="Force colors on or off; None detects")
    import_name: str = Field("ava", description="Module test files must import, named in the missing-import message")

    @field_validator("duration_threshold", mode="before")
    @classmethod
    def _default_threshold(cls, v):
        return v or DEFAULT_DURATION_THRESHOLD

def load_config(path: str) -> ReporterConfig:
    data = yaml.safe_load(pathlib.Path(path).read_text()) or {}
    return ReporterConfig.model_validate(data)
