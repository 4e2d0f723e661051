#!/usr/bin/env python3
"""
Multi-factor site scoring for hydrogen infrastructure candidates.

Five factor scores, each on a 0-100 scale, are combined into one composite
score using a fixed weight row per optimization criteria:

    renewable_proximity    linear decay to 0 at 200 km from the nearest renewable source
    market_demand          demand-weighted proximity to demand centers, boosted by priority
    cost_optimization      placeholder: rewards an average 50 km spacing from operational assets
    transport_access       placeholder: demand centers stand in for transport hubs (150 km cutoff)
    regulatory_compliance  placeholder: 80% of market_demand, not independent data

The placeholder factors are heuristics until transport-network and zoning
datasets exist; each is a separate function so it can be swapped for a real
data source without touching the composite.

Every factor function takes a distance array whose last axis runs over the
reference points. A 1-D array scores one site and returns a float; a 2-D
(sites x references) array scores many sites at once and returns an array.
"""

import math
import numpy as np

from h2_site_entities import (
    DemandCenter,
    DemandPriority,
    GeoPoint,
    HydrogenAsset,
    OptimizationCriteria,
    RenewableSource,
    SiteFactors,
    SiteScore,
    iter_records,
    parse_criteria,
)
from site_geometry import haversine_km

RENEWABLE_CUTOFF_KM = 200.0
MARKET_CUTOFF_KM = 100.0
TRANSPORT_CUTOFF_KM = 150.0
COST_OPTIMAL_DISTANCE_KM = 50.0
COST_DEVIATION_SPAN_KM = 100.0
COST_NEUTRAL_SCORE = 50.0
REGULATORY_DEMAND_CORRELATION = 0.8
DEFAULT_ANNUAL_DEMAND = 1000.0

PRIORITY_MULTIPLIERS = {
    DemandPriority.HIGH: 2.0,
    DemandPriority.MEDIUM: 1.5,
    DemandPriority.LOW: 1.0,
}

FACTOR_NAMES = (
    'renewable_proximity',
    'market_demand',
    'cost_optimization',
    'transport_access',
    'regulatory_compliance',
)

# Column order follows FACTOR_NAMES. REGULATORY_ZONES is the equal-weight
# default row; anything outside these five criteria is rejected.
CRITERIA_WEIGHTS = {
    OptimizationCriteria.RENEWABLE_PROXIMITY: (0.40, 0.20, 0.20, 0.10, 0.10),
    OptimizationCriteria.MARKET_DEMAND:       (0.20, 0.40, 0.15, 0.15, 0.10),
    OptimizationCriteria.COST_OPTIMIZATION:   (0.20, 0.20, 0.40, 0.10, 0.10),
    OptimizationCriteria.TRANSPORT_ACCESS:    (0.15, 0.25, 0.15, 0.35, 0.10),
    OptimizationCriteria.REGULATORY_ZONES:    (0.20, 0.20, 0.20, 0.20, 0.20),
}


def get_criteria_weights(criteria):
    """Weight per factor name for the given criteria."""
    row = CRITERIA_WEIGHTS[parse_criteria(criteria)]
    return dict(zip(FACTOR_NAMES, row))


def _as_score(values):
    values = np.asarray(values, dtype=float)
    if values.ndim == 0:
        return float(values)
    return values


def _distances(distances):
    return np.asarray(distances, dtype=float)


def _linear_decay(distances, cutoff_km):
    return np.clip(100.0 - (distances / cutoff_km) * 100.0, 0.0, 100.0)


# ---------------------------------------------------------------------------
# Factor functions
# ---------------------------------------------------------------------------

def renewable_proximity_score(renewable_distances):
    """100 at a renewable source, falling linearly to 0 at 200 km. No sources scores 0."""
    d = _distances(renewable_distances)
    if d.shape[-1] == 0:
        return _as_score(np.zeros(d.shape[:-1]))
    return _as_score(_linear_decay(d.min(axis=-1), RENEWABLE_CUTOFF_KM))


def market_demand_score(demand_distances, demand_weights, priority_multipliers):
    """
    Weighted average of priority-boosted proximity over all demand centers.

    Parameters
    ----------
    demand_distances : array-like, last axis over demand centers
    demand_weights : array-like
        Annual demand per center (tons/year), already defaulted.
    priority_multipliers : array-like
        2.0 for high, 1.5 for medium, 1.0 for low priority.

    Priority multipliers can push the raw average past 100, so the result
    is capped to stay on the common 0-100 scale.
    """
    d = _distances(demand_distances)
    weights = np.asarray(demand_weights, dtype=float)
    multipliers = np.asarray(priority_multipliers, dtype=float)

    if d.shape[-1] == 0 or weights.size == 0 or weights.max() <= 0:
        return _as_score(np.zeros(d.shape[:-1]))

    # Relative weights keep sums of very large demand figures finite
    weights = weights / weights.max()
    total_weight = weights.sum()
    proximity = _linear_decay(d, MARKET_CUTOFF_KM)
    weighted = (proximity * multipliers * weights).sum(axis=-1) / total_weight
    return _as_score(np.clip(weighted, 0.0, 100.0))


def cost_optimization_score(operational_asset_distances):
    """
    Placeholder cost heuristic: an average 50 km from operational assets
    scores 100, falling 1 point per km of deviation. Without operational
    assets the score is the neutral 50.
    """
    d = _distances(operational_asset_distances)
    if d.shape[-1] == 0:
        return _as_score(np.full(d.shape[:-1], COST_NEUTRAL_SCORE))

    deviation = np.abs(d.mean(axis=-1) - COST_OPTIMAL_DISTANCE_KM)
    return _as_score(np.clip(100.0 - (deviation / COST_DEVIATION_SPAN_KM) * 100.0, 0.0, 100.0))


def transport_access_score(demand_distances):
    """Placeholder: nearest demand center as a transport hub proxy, 0 at 150 km."""
    d = _distances(demand_distances)
    if d.shape[-1] == 0:
        return _as_score(np.zeros(d.shape[:-1]))
    return _as_score(_linear_decay(d.min(axis=-1), TRANSPORT_CUTOFF_KM))


def regulatory_compliance_score(market_demand):
    """Placeholder: regulatory favourability tracks demand density at 80%."""
    return _as_score(np.asarray(market_demand, dtype=float) * REGULATORY_DEMAND_CORRELATION)


# ---------------------------------------------------------------------------
# Composite
# ---------------------------------------------------------------------------

def weighted_score(factor_matrix, criteria):
    """Unrounded weighted sum over the last axis (ordered as FACTOR_NAMES)."""
    weights = np.asarray(CRITERIA_WEIGHTS[parse_criteria(criteria)], dtype=float)
    return np.asarray(factor_matrix, dtype=float) @ weights


def round_score(values):
    """Round half up and clamp to the integer range 0-100. Non-finite values score 0."""
    values = np.asarray(values, dtype=float)
    values = np.where(np.isfinite(values), values, 0.0)
    rounded = np.clip(np.floor(values + 0.5), 0, 100).astype(int)
    if rounded.ndim == 0:
        return int(rounded)
    return rounded


class ReferenceSet:
    """
    Coordinate arrays extracted once from the reference collections.

    The collections themselves are never modified; dicts are accepted and
    converted to entities so callers can pass raw records.
    """

    def __init__(self, assets=(), renewables=(), demand_centers=()):
        self.assets = tuple(_coerce(assets, HydrogenAsset))
        self.renewables = tuple(_coerce(renewables, RenewableSource))
        self.demand_centers = tuple(_coerce(demand_centers, DemandCenter))

        self.asset_lats, self.asset_lons = _coordinate_arrays(self.assets)
        operational = [a for a in self.assets if a.is_operational]
        self.operational_lats, self.operational_lons = _coordinate_arrays(operational)
        self.renewable_lats, self.renewable_lons = _coordinate_arrays(self.renewables)
        self.demand_lats, self.demand_lons = _coordinate_arrays(self.demand_centers)

        self.demand_weights = np.array(
            [c.annual_demand or DEFAULT_ANNUAL_DEMAND for c in self.demand_centers], dtype=float)
        self.priority_multipliers = np.array(
            [PRIORITY_MULTIPLIERS[c.priority] for c in self.demand_centers], dtype=float)

    @property
    def empty_collections(self):
        """Names of reference collections with no entries."""
        empty = []
        if not self.assets:
            empty.append('assets')
        if not self.renewables:
            empty.append('renewables')
        if not self.demand_centers:
            empty.append('demand_centers')
        return empty

    def factor_matrix(self, latitudes, longitudes):
        """
        Score many points at once.

        Returns an (n, 5) array of factor scores ordered as FACTOR_NAMES.
        """
        lats = np.asarray(latitudes, dtype=float).reshape(-1, 1)
        lons = np.asarray(longitudes, dtype=float).reshape(-1, 1)

        renewable_d = haversine_km(lats, lons, self.renewable_lats[None, :], self.renewable_lons[None, :])
        demand_d = haversine_km(lats, lons, self.demand_lats[None, :], self.demand_lons[None, :])
        operational_d = haversine_km(lats, lons, self.operational_lats[None, :], self.operational_lons[None, :])

        market = market_demand_score(demand_d, self.demand_weights, self.priority_multipliers)
        return np.column_stack([
            renewable_proximity_score(renewable_d),
            market,
            cost_optimization_score(operational_d),
            transport_access_score(demand_d),
            regulatory_compliance_score(market),
        ])

    def score_points(self, latitudes, longitudes, criteria):
        """Return (composite int array, factor matrix) for many points."""
        factors = self.factor_matrix(latitudes, longitudes)
        return round_score(weighted_score(factors, criteria)), factors

    def score_site(self, point, criteria):
        criteria = parse_criteria(criteria)
        point = _as_point(point)
        composites, factors = self.score_points([point.latitude], [point.longitude], criteria)
        return build_site_score(point, composites[0], factors[0])


def build_site_score(point, composite, factor_row):
    return SiteScore(
        point=point,
        composite_score=int(composite),
        factors=SiteFactors(*(float(v) for v in factor_row)),
    )


def score_site(point, criteria, assets, renewables, demand_centers):
    """
    Score a single candidate point against the supplied reference collections.

    Raises InvalidCriteriaError for unknown criteria and InvalidCoordinateError
    for an invalid point. Empty collections are not errors; the affected
    factors fall to their floor (0, or 50 for cost optimization).
    """
    criteria = parse_criteria(criteria)
    point = _as_point(point)
    return ReferenceSet(assets, renewables, demand_centers).score_site(point, criteria)


def _as_point(point):
    if isinstance(point, GeoPoint):
        return point
    if isinstance(point, dict):
        return GeoPoint.from_dict(point)
    if isinstance(point, (tuple, list)):
        return GeoPoint(*point)
    return GeoPoint(point.latitude, point.longitude)


def _coerce(items, cls):
    """Entities pass through; dicts and DataFrame rows are converted."""
    return [cls.from_dict(item) if isinstance(item, dict) else item for item in iter_records(items)]


def _coordinate_arrays(features):
    lats = np.array([f.latitude for f in features], dtype=float)
    lons = np.array([f.longitude for f in features], dtype=float)
    return lats, lons


def factors_in_bounds(factors):
    """True when every factor score is a finite value within 0-100."""
    return all(math.isfinite(v) and 0.0 <= v <= 100.0 for v in factors.as_tuple())
