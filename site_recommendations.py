#!/usr/bin/env python3
"""
Investment site recommendations built on top of the scoring model.

Two sources exist side by side:

    curated  a small fixed pool of named candidate regions with estimated
             costs, filtered by the requested investment range
    grid     the model's lattice search, converted to recommendation records

Grid sites have no cost model yet, so the investment range filter only
applies to the curated pool.
"""

import math
import re

from h2_site_entities import parse_criteria
from site_geometry import format_coordinates
from site_scoring import FACTOR_NAMES

LAKH = 100_000
CRORE = 10_000_000

_UNIT_MULTIPLIERS = {'l': LAKH, 'lakh': LAKH, 'cr': CRORE, 'crore': CRORE}
_AMOUNT_PATTERN = re.compile(r'(\d+(?:\.\d+)?)\s*(l|lakh|cr|crore)?\b', re.IGNORECASE)

CURATED_CANDIDATE_POOL = (
    {
        'name': 'Gujarat Industrial Corridor',
        'latitude': 23.5,
        'longitude': 70.5,
        'score': 92,
        'estimated_cost': 4_580_000_000,
        'timeline': '18 months',
        'tags': ['High Demand', 'Near Renewables'],
    },
    {
        'name': 'Tamil Nadu Coastal Hub',
        'latitude': 11.5,
        'longitude': 79.0,
        'score': 87,
        'estimated_cost': 4_000_000_000,
        'timeline': '24 months',
        'tags': ['Port Access', 'Industrial Zone'],
    },
    {
        'name': 'Rajasthan Solar Zone',
        'latitude': 26.0,
        'longitude': 72.0,
        'score': 84,
        'estimated_cost': 3_500_000_000,
        'timeline': '15 months',
        'tags': ['Solar Rich', 'Government Support'],
    },
)

FACTOR_TAGS = {
    'renewable_proximity': 'Near Renewables',
    'market_demand': 'High Demand',
    'cost_optimization': 'Infrastructure Synergy',
    'transport_access': 'Transport Access',
    'regulatory_compliance': 'Regulatory Fit',
}


def parse_investment_range(label):
    """
    Parse an investment range label into (min, max) rupees.

    Handles "₹10L - ₹50L" style bounded ranges and "₹100L+" open ranges in
    lakh (L) or crore (Cr). Anything unparseable means no constraint,
    i.e. (0, inf).
    """
    text = (label or '').replace(',', '')
    amounts = [float(value) * _UNIT_MULTIPLIERS.get((unit or 'l').lower(), LAKH)
               for value, unit in _AMOUNT_PATTERN.findall(text)]

    if len(amounts) >= 2:
        low, high = amounts[0], amounts[1]
        return (min(low, high), max(low, high))
    if len(amounts) == 1 and text.rstrip().endswith('+'):
        return (amounts[0], math.inf)
    return (0.0, math.inf)


def _recommendation(name, latitude, longitude, score, criteria, investment_range,
                    estimated_cost=None, timeline=None, tags=None):
    return {
        'name': name,
        'location': {'latitude': latitude, 'longitude': longitude},
        'score': int(score),
        'estimated_cost': estimated_cost,
        'timeline': timeline,
        'tags': list(tags or []),
        'criteria': [criteria.value],
        'investment_range': investment_range,
    }


def curated_recommendations(criteria, investment_range, candidate_pool=CURATED_CANDIDATE_POOL):
    """Filter the candidate pool by investment range, highest score first."""
    criteria = parse_criteria(criteria)
    low, high = parse_investment_range(investment_range)

    selected = [site for site in candidate_pool if low <= site['estimated_cost'] <= high]
    selected = sorted(selected, key=lambda site: site['score'], reverse=True)

    return [
        _recommendation(site['name'], site['latitude'], site['longitude'], site['score'],
                        criteria, investment_range, site['estimated_cost'],
                        site.get('timeline'), site.get('tags'))
        for site in selected
    ]


def factor_tags(factors, threshold=70.0):
    """Tags for each factor scoring at or above threshold, strongest first."""
    values = factors.to_dict()
    strong = [name for name in FACTOR_NAMES if values[name] >= threshold]
    strong.sort(key=lambda name: values[name], reverse=True)
    return [FACTOR_TAGS[name] for name in strong]


def recommendations_from_sites(site_scores, criteria, investment_range, tag_threshold=70.0):
    """Convert ranked SiteScores into recommendation records (no cost estimate)."""
    criteria = parse_criteria(criteria)
    return [
        _recommendation(
            f"Candidate Site {format_coordinates(site.latitude, site.longitude)}",
            site.latitude, site.longitude, site.composite_score,
            criteria, investment_range,
            tags=factor_tags(site.factors, tag_threshold),
        )
        for site in site_scores
    ]


def generate_recommendations(criteria, investment_range, number_of_sites=None,
                             source='curated', model=None, candidate_pool=CURATED_CANDIDATE_POOL,
                             site_scores=None):
    """
    Produce ordered recommendation records for a criteria and investment range.

    Parameters
    ----------
    criteria : str or OptimizationCriteria
    investment_range : str
        Range label such as "₹50L - ₹100L"; must not be empty.
    number_of_sites : int, optional
        Truncate the result to this many records.
    source : {'curated', 'grid'}
        'grid' uses site_scores when given, otherwise runs the lattice
        search of model (a H2SiteOptimizationModel).
    site_scores : list of SiteScore, optional
        Ranked sites from a previous find_optimal_sites() run.
    """
    criteria = parse_criteria(criteria)
    if not investment_range or not str(investment_range).strip():
        raise ValueError("Investment range required")
    if number_of_sites is not None and (int(number_of_sites) != number_of_sites or number_of_sites < 0):
        raise ValueError(f"number_of_sites must be a non-negative integer, got {number_of_sites!r}")

    if source == 'curated':
        recommendations = curated_recommendations(criteria, investment_range, candidate_pool)
    elif source == 'grid':
        if site_scores is None:
            if model is None:
                raise ValueError("Grid recommendations require a site optimization model or site scores")
            site_scores = model.find_optimal_sites(criteria, number_of_sites=number_of_sites)
        threshold = model.config.get('recommendation_tag_threshold', 70.0) if model is not None else 70.0
        recommendations = recommendations_from_sites(site_scores, criteria, investment_range, threshold)
    else:
        raise ValueError(f"Unknown recommendation source: {source}")

    if number_of_sites is not None:
        recommendations = recommendations[:int(number_of_sites)]
    return recommendations
