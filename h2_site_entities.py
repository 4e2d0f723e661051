#!/usr/bin/env python3
"""
Reference entities and score records for the H2 site optimization model.

Hydrogen assets, renewable sources and demand centers are read-only inputs
supplied fresh on every scoring run. Site scores are derived and never
persisted by the model.
"""

import math
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import pandas as pd


class SiteOptimizationError(ValueError):
    """Base class for input validation failures."""


class InvalidCoordinateError(SiteOptimizationError):
    """Latitude/longitude outside the valid range or not finite."""


class InvalidCriteriaError(SiteOptimizationError):
    """Optimization criteria outside the recognised set."""


class OptimizationCriteria(str, Enum):
    RENEWABLE_PROXIMITY = 'renewable_proximity'
    MARKET_DEMAND = 'market_demand'
    COST_OPTIMIZATION = 'cost_optimization'
    REGULATORY_ZONES = 'regulatory_zones'
    TRANSPORT_ACCESS = 'transport_access'


class AssetType(str, Enum):
    PLANT = 'plant'
    STORAGE = 'storage'
    PIPELINE = 'pipeline'
    HUB = 'hub'


class AssetStatus(str, Enum):
    OPERATIONAL = 'operational'
    UNDER_CONSTRUCTION = 'under_construction'
    PLANNED = 'planned'


class RenewableType(str, Enum):
    SOLAR = 'solar'
    WIND = 'wind'
    HYDRO = 'hydro'


class DemandPriority(str, Enum):
    HIGH = 'high'
    MEDIUM = 'medium'
    LOW = 'low'


def parse_criteria(criteria: Union[str, OptimizationCriteria]) -> OptimizationCriteria:
    """Resolve a criteria value, raising InvalidCriteriaError for anything unrecognised."""
    if isinstance(criteria, OptimizationCriteria):
        return criteria
    try:
        return OptimizationCriteria(criteria)
    except ValueError:
        valid = ', '.join(c.value for c in OptimizationCriteria)
        raise InvalidCriteriaError(
            f"Unknown optimization criteria: {criteria!r} (expected one of {valid})"
        ) from None


def validate_coordinates(latitude, longitude):
    """Raise InvalidCoordinateError unless both values are finite and in range."""
    try:
        lat = float(latitude)
        lon = float(longitude)
    except (TypeError, ValueError):
        raise InvalidCoordinateError(
            f"Coordinates must be numeric, got ({latitude!r}, {longitude!r})"
        ) from None

    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise InvalidCoordinateError(f"Coordinates must be finite, got ({lat}, {lon})")
    if not -90.0 <= lat <= 90.0:
        raise InvalidCoordinateError(f"Latitude {lat} outside [-90, 90]")
    if not -180.0 <= lon <= 180.0:
        raise InvalidCoordinateError(f"Longitude {lon} outside [-180, 180]")
    return lat, lon


def _pick(record: Dict[str, Any], *keys, default=None):
    """Return the first present, non-null value among snake_case/camelCase aliases."""
    for key in keys:
        value = record.get(key)
        if value is None:
            continue
        if isinstance(value, float) and math.isnan(value):
            continue
        return value
    return default


@dataclass(frozen=True)
class GeoPoint:
    """A validated latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self):
        lat, lon = validate_coordinates(self.latitude, self.longitude)
        object.__setattr__(self, 'latitude', lat)
        object.__setattr__(self, 'longitude', lon)

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> 'GeoPoint':
        return cls(
            latitude=_pick(record, 'latitude', 'lat'),
            longitude=_pick(record, 'longitude', 'lon', 'lng'),
        )

    def to_dict(self) -> Dict[str, float]:
        return {'latitude': self.latitude, 'longitude': self.longitude}


@dataclass(frozen=True)
class HydrogenAsset:
    """Existing or planned hydrogen infrastructure (plant, storage, pipeline, hub)."""

    latitude: float
    longitude: float
    type: AssetType
    status: AssetStatus
    name: Optional[str] = None
    subtype: Optional[str] = None
    capacity: Optional[str] = None
    annual_output: Optional[str] = None
    investment_cost: Optional[float] = None
    owner: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self):
        lat, lon = validate_coordinates(self.latitude, self.longitude)
        object.__setattr__(self, 'latitude', lat)
        object.__setattr__(self, 'longitude', lon)
        object.__setattr__(self, 'type', AssetType(self.type))
        object.__setattr__(self, 'status', AssetStatus(self.status))

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.latitude, self.longitude)

    @property
    def is_operational(self) -> bool:
        return self.status is AssetStatus.OPERATIONAL

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> 'HydrogenAsset':
        return cls(
            latitude=_pick(record, 'latitude', 'lat'),
            longitude=_pick(record, 'longitude', 'lon', 'lng'),
            type=_pick(record, 'type', 'asset_type'),
            status=_pick(record, 'status'),
            name=_pick(record, 'name'),
            subtype=_pick(record, 'subtype'),
            capacity=_pick(record, 'capacity'),
            annual_output=_pick(record, 'annual_output', 'annualOutput'),
            investment_cost=_pick(record, 'investment_cost', 'investmentCost'),
            owner=_pick(record, 'owner'),
            description=_pick(record, 'description'),
        )

    def to_dict(self) -> Dict[str, Any]:
        record = asdict(self)
        record['type'] = self.type.value
        record['status'] = self.status.value
        return record


@dataclass(frozen=True)
class RenewableSource:
    """Renewable generation site; only its location matters for scoring."""

    latitude: float
    longitude: float
    type: RenewableType
    name: Optional[str] = None
    capacity: Optional[str] = None
    status: Optional[str] = None
    owner: Optional[str] = None

    def __post_init__(self):
        lat, lon = validate_coordinates(self.latitude, self.longitude)
        object.__setattr__(self, 'latitude', lat)
        object.__setattr__(self, 'longitude', lon)
        object.__setattr__(self, 'type', RenewableType(self.type))

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.latitude, self.longitude)

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> 'RenewableSource':
        return cls(
            latitude=_pick(record, 'latitude', 'lat'),
            longitude=_pick(record, 'longitude', 'lon', 'lng'),
            type=_pick(record, 'type', 'source_type'),
            name=_pick(record, 'name'),
            capacity=_pick(record, 'capacity'),
            status=_pick(record, 'status'),
            owner=_pick(record, 'owner'),
        )

    def to_dict(self) -> Dict[str, Any]:
        record = asdict(self)
        record['type'] = self.type.value
        return record


@dataclass(frozen=True)
class DemandCenter:
    """Hydrogen consumer; annual_demand is in tons H2/year."""

    latitude: float
    longitude: float
    priority: DemandPriority
    annual_demand: Optional[float] = None
    name: Optional[str] = None
    type: Optional[str] = None

    def __post_init__(self):
        lat, lon = validate_coordinates(self.latitude, self.longitude)
        object.__setattr__(self, 'latitude', lat)
        object.__setattr__(self, 'longitude', lon)
        object.__setattr__(self, 'priority', DemandPriority(self.priority))
        if self.annual_demand is not None:
            demand = float(self.annual_demand)
            if not math.isfinite(demand) or demand < 0:
                raise ValueError(f"annual_demand must not be negative, got {self.annual_demand!r}")
            object.__setattr__(self, 'annual_demand', demand)

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.latitude, self.longitude)

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> 'DemandCenter':
        return cls(
            latitude=_pick(record, 'latitude', 'lat'),
            longitude=_pick(record, 'longitude', 'lon', 'lng'),
            priority=_pick(record, 'priority'),
            annual_demand=_pick(record, 'annual_demand', 'annualDemand'),
            name=_pick(record, 'name'),
            type=_pick(record, 'type', 'demand_type'),
        )

    def to_dict(self) -> Dict[str, Any]:
        record = asdict(self)
        record['priority'] = self.priority.value
        return record


@dataclass(frozen=True)
class SiteFactors:
    """Individual 0-100 factor scores behind a composite site score."""

    renewable_proximity: float
    market_demand: float
    cost_optimization: float
    transport_access: float
    regulatory_compliance: float

    def as_tuple(self):
        return (
            self.renewable_proximity,
            self.market_demand,
            self.cost_optimization,
            self.transport_access,
            self.regulatory_compliance,
        )

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class SiteScore:
    point: GeoPoint
    composite_score: int
    factors: SiteFactors

    @property
    def latitude(self) -> float:
        return self.point.latitude

    @property
    def longitude(self) -> float:
        return self.point.longitude

    def to_dict(self) -> Dict[str, Any]:
        return {
            'latitude': self.point.latitude,
            'longitude': self.point.longitude,
            'score': self.composite_score,
            'factors': self.factors.to_dict(),
        }


def assets_from_records(records) -> List[HydrogenAsset]:
    return [HydrogenAsset.from_dict(r) for r in iter_records(records)]


def renewables_from_records(records) -> List[RenewableSource]:
    return [RenewableSource.from_dict(r) for r in iter_records(records)]


def demand_centers_from_records(records) -> List[DemandCenter]:
    return [DemandCenter.from_dict(r) for r in iter_records(records)]


def iter_records(records):
    """Accept a DataFrame or any iterable of dicts."""
    if isinstance(records, pd.DataFrame):
        return records.to_dict('records')
    return list(records)
