from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CASE_NUMBER_COLUMN = "Case Number"
DEFAULT_DISTRIBUTION = (4, 3, 2)
DEFAULT_PALETTE = ["#C1F11D", "#9BC915", "#75A110", "#4E790B", "#E0E0E0"]

ChartType = Literal["bar", "pie"]


class ColumnsConfig(BaseModel):
    case_number: str = DEFAULT_CASE_NUMBER_COLUMN


class InputConfig(BaseModel):
    encoding: str = "utf-8-sig"
    delimiter: str = Field(default=",", min_length=1, max_length=1)


class TabulationConfig(BaseModel):
    top_n: int = Field(default=3, ge=1)
    others_label: str = "Others"


class SamplingConfig(BaseModel):
    copy_count: int = Field(default=16, ge=1)
    distribution: list[int] = Field(default_factory=lambda: list(DEFAULT_DISTRIBUTION))
    include_case_number: bool = False
    random_seed: int | None = Field(default=None, ge=0)

    @field_validator("distribution")
    @classmethod
    def _positive_units(cls, value: list[int]) -> list[int]:
        if not value:
            raise ValueError("distribution must list at least one rank")
        if any(units < 1 for units in value):
            raise ValueError("distribution units must be positive integers")
        return value


class ChartConfig(BaseModel):
    chart_type: ChartType = "bar"
    palette: list[str] = Field(default_factory=lambda: list(DEFAULT_PALETTE))
    emphasis: bool = False
    top_scale: float = Field(default=2.0, gt=0.0)
    others_scale: float = Field(default=0.3, gt=0.0)

    @field_validator("palette")
    @classmethod
    def _palette_has_others_color(cls, value: list[str]) -> list[str]:
        # Last entry is reserved for the "Others" bucket.
        if len(value) < 2:
            raise ValueError("palette needs at least one category colour and one 'Others' colour")
        return value


class OutputsConfig(BaseModel):
    tables_format: Literal["csv", "parquet"] = "csv"
    figures_format: str = "png"


class LoggingConfig(BaseModel):
    level: str = "INFO"


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    columns: ColumnsConfig = Field(default_factory=ColumnsConfig)
    input: InputConfig = Field(default_factory=InputConfig)
    tabulation: TabulationConfig = Field(default_factory=TabulationConfig)
    sampling: SamplingConfig = Field(default_factory=SamplingConfig)
    chart: ChartConfig = Field(default_factory=ChartConfig)
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def load_config(path: Path | None) -> AppConfig:
    """Load YAML config; a missing path yields the built-in defaults."""
    if path is None:
        return AppConfig()
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    return AppConfig.model_validate(data)
