"""Visualization spec models consumed by the tree builder.

A spec is either a single :class:`Chart` or a :class:`FacetedChart` holding one
chart per value of a faceted field. Guides (axes and legends) are either
``discrete`` (enumerated values) or ``continuous`` (sorted tick values). Both
levels are discriminated on their ``type`` field so that a payload always
validates into exactly one concrete model.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

AxisOrientation = Literal["x", "y"]


class _SpecModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )


class _GuideBase(_SpecModel):
    """Fields shared by every axis and legend."""

    field: str
    title: Optional[str] = None
    scale_type: Optional[str] = Field(
        default=None,
        description="Scale kind: 'quantitative', 'temporal', 'ordinal', 'nominal'...",
    )
    values: list[Any] = Field(default_factory=list)

    @property
    def label(self) -> str:
        """Title shown to users, falling back to the field name."""

        return self.title or self.field


def _is_year(text: str) -> bool:
    # bare years stay numeric so rows are matched on their year alone
    stripped = text.strip()
    return len(stripped) == 4 and stripped.isdigit()


class _ContinuousGuide(_GuideBase):
    type: Literal["continuous"] = "continuous"

    @field_validator("values", mode="after")
    @classmethod
    def _coerce_temporal(cls, values: list[Any], info) -> list[Any]:
        if info.data.get("scale_type") != "temporal":
            return values
        coerced: list[Any] = []
        for value in values:
            if isinstance(value, str) and not _is_year(value):
                coerced.append(pd.Timestamp(value))
            else:
                coerced.append(value)
        return coerced


class _DiscreteGuide(_GuideBase):
    type: Literal["discrete"] = "discrete"


class DiscreteAxis(_DiscreteGuide):
    """Axis over enumerated values."""

    axis_type: AxisOrientation


class ContinuousAxis(_ContinuousGuide):
    """Axis over sorted tick values."""

    axis_type: AxisOrientation


class DiscreteLegend(_DiscreteGuide):
    """Legend over enumerated values."""

    channel: Optional[str] = None


class ContinuousLegend(_ContinuousGuide):
    """Legend over a continuous range (no tree children are derived from it)."""

    channel: Optional[str] = None


Axis = Annotated[Union[DiscreteAxis, ContinuousAxis], Field(discriminator="type")]
Legend = Annotated[
    Union[DiscreteLegend, ContinuousLegend], Field(discriminator="type")
]
AxisGuide = Union[DiscreteAxis, ContinuousAxis]
LegendGuide = Union[DiscreteLegend, ContinuousLegend]
Guide = Union[AxisGuide, LegendGuide]
AXIS_TYPES = (DiscreteAxis, ContinuousAxis)
LEGEND_TYPES = (DiscreteLegend, ContinuousLegend)


class Chart(_SpecModel):
    """A single chart: one mark type with its guides and data rows."""

    type: Literal["chart"] = "chart"
    mark: Optional[str] = Field(
        default=None, description="Mark type: 'point', 'bar', 'line', 'area'..."
    )
    axes: list[Axis] = Field(default_factory=list)
    legends: list[Legend] = Field(default_factory=list)
    data: list[dict[str, Any]] = Field(default_factory=list)
    title: Optional[str] = None
    description: Optional[str] = None


class FacetedChart(_SpecModel):
    """Several charts, one per value of ``faceted_field``."""

    type: Literal["facetedChart"] = "facetedChart"
    faceted_field: str
    charts: dict[str, Chart] = Field(default_factory=dict)
    data: list[dict[str, Any]] = Field(default_factory=list)
    title: Optional[str] = None
    description: Optional[str] = None

    @field_validator("charts", mode="before")
    @classmethod
    def _stringify_keys(cls, charts: Any) -> Any:
        if isinstance(charts, dict):
            return {str(key): value for key, value in charts.items()}
        return charts


VisualizationSpec = Annotated[Union[Chart, FacetedChart], Field(discriminator="type")]

_SPEC_ADAPTER: TypeAdapter = TypeAdapter(VisualizationSpec)


def parse_spec(payload: Any) -> Chart | FacetedChart:
    """Validate a mapping (or model) into a concrete visualization spec."""

    if isinstance(payload, (Chart, FacetedChart)):
        return payload
    return _SPEC_ADAPTER.validate_python(payload)


def temporal_fields(spec: Chart | FacetedChart) -> list[str]:
    """Fields rendered on a temporal scale by any guide of ``spec``."""

    charts = list(spec.charts.values()) if isinstance(spec, FacetedChart) else [spec]
    fields: list[str] = []
    for chart in charts:
        for guide in [*chart.axes, *chart.legends]:
            if guide.scale_type == "temporal" and guide.field not in fields:
                fields.append(guide.field)
    return fields


__all__ = [
    "AXIS_TYPES",
    "Axis",
    "AxisGuide",
    "AxisOrientation",
    "Chart",
    "ContinuousAxis",
    "ContinuousLegend",
    "DiscreteAxis",
    "DiscreteLegend",
    "FacetedChart",
    "Guide",
    "LEGEND_TYPES",
    "Legend",
    "LegendGuide",
    "VisualizationSpec",
    "parse_spec",
    "temporal_fields",
]
