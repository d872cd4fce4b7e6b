"""Typed configuration models for trip reconstruction workflows."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Set

from pydantic import BaseModel, Field, field_validator, model_validator


class ColumnNames(BaseModel):
    """Column headers of the validation export. Matching is exact and case-sensitive."""

    transaction_number: str = Field(default="Num.Transacción")
    timestamp: str = Field(default="Data")
    agency: str = Field(default="Agència")
    operation: str = Field(default="Operació")
    transaction_type: str = Field(default="Transacció")
    station: str = Field(default="Estació Fix")


class NormalizationConfig(BaseModel):
    """Row filters applied while normalizing validation events."""

    accepted_transaction_types: Set[str] = Field(
        default_factory=lambda: {"Validació correcta", "Validació"},
        description="Transaction types kept; every other type is dropped.",
    )
    excluded_operations: Set[str] = Field(
        default_factory=lambda: {
            "Emissió",
            "Fabricació",
            "inspecció",
            "Operació de recàrrega",
            "Venda i primera operació de càrrega",
        },
        description="Card-management operations that never describe a ride.",
    )


class ReconstructionConfig(BaseModel):
    """Parameters controlling entry/exit pairing."""

    paired_agency: str = Field(default="FGC", description="Agency whose entries are paired with exits.")
    entry_operation: str = Field(default="Validació d'entrada")
    exit_operation: str = Field(default="Validació de Sortida")
    max_trip_minutes: float = Field(default=180.0, gt=0.0)
    require_consecutive_numbers: bool = Field(
        default=False,
        description="Only pair an exit whose transaction number directly follows the entry's.",
    )

    @model_validator(mode="after")
    def _distinct_labels(self) -> "ReconstructionConfig":
        if self.entry_operation == self.exit_operation:
            raise ValueError("entry_operation and exit_operation must differ")
        return self


class ViewConfig(BaseModel):
    """Presentation limits for trip listings and breakdowns."""

    max_rows: int = Field(default=200, ge=1)
    unknown_agency_label: str = Field(default="Desconocida")

    @field_validator("unknown_agency_label")
    def _non_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("unknown_agency_label must not be blank")
        return value


class AppConfig(BaseModel):
    """Top-level configuration."""

    columns: ColumnNames = Field(default_factory=ColumnNames)
    normalization: NormalizationConfig = Field(default_factory=NormalizationConfig)
    reconstruction: ReconstructionConfig = Field(default_factory=ReconstructionConfig)
    view: ViewConfig = Field(default_factory=ViewConfig)


def load_config(path: Optional[Path] = None) -> AppConfig:
    """Load configuration from disk or return defaults."""

    if path is None:
        return AppConfig()
    data = _load_json_or_yaml(path)
    return AppConfig.model_validate(data or {})


def _load_json_or_yaml(path: Path) -> Dict[str, object]:
    if path.suffix in {".json"}:
        import json

        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    if path.suffix in {".yaml", ".yml"}:
        import yaml

        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle)
    raise ValueError(f"Unsupported config format: {path}")
