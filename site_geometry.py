#!/usr/bin/env python3
"""
Great-circle geometry and map helpers for H2 site scoring.

All distances are kilometres on a spherical Earth (R = 6371 km).
"""

import math
import numpy as np

from h2_site_entities import AssetType

EARTH_RADIUS_KM = 6371.0

# Plants are only linked to storage within this range
PIPELINE_MAX_LINK_KM = 200.0

DEFAULT_MAP_CENTER = (23.0, 72.0)


def distance_km(point_a, point_b):
    """
    Haversine distance between two objects exposing latitude/longitude.

    No validation happens here: NaN or infinite coordinates propagate into
    the result as NaN, so callers validate points before use.
    """
    return float(haversine_km(point_a.latitude, point_a.longitude,
                              point_b.latitude, point_b.longitude))


def haversine_km(lat1, lon1, lat2, lon2):
    """
    Vectorised haversine distance. Inputs broadcast under numpy rules, so a
    column of candidate points against a row of reference points yields the
    full distance matrix.
    """
    lat1 = np.asarray(lat1, dtype=float)
    lon1 = np.asarray(lon1, dtype=float)
    lat2 = np.asarray(lat2, dtype=float)
    lon2 = np.asarray(lon2, dtype=float)

    with np.errstate(invalid='ignore'):
        dlat = np.radians(lat2 - lat1)
        dlon = np.radians(lon2 - lon1)
        a = (np.sin(dlat / 2) ** 2 +
             np.cos(np.radians(lat1)) * np.cos(np.radians(lat2)) * np.sin(dlon / 2) ** 2)
        # Rounding can push a slightly outside [0, 1] near antipodes
        a = np.clip(a, 0.0, 1.0)
        c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def to_unit_vectors(latitudes, longitudes):
    """Convert lat/lon degrees to 3D unit vectors for cKDTree queries."""
    lat = np.radians(np.asarray(latitudes, dtype=float))
    lon = np.radians(np.asarray(longitudes, dtype=float))
    return np.column_stack([
        np.cos(lat) * np.cos(lon),
        np.cos(lat) * np.sin(lon),
        np.sin(lat),
    ])


def chord_to_arc_km(chord):
    """Convert unit-sphere chord length to great-circle kilometres."""
    chord = np.clip(np.asarray(chord, dtype=float), 0.0, 2.0)
    return 2 * EARTH_RADIUS_KM * np.arcsin(chord / 2)


def is_valid_coordinate(lat, lng):
    """True when both values are finite numbers within latitude/longitude range."""
    try:
        lat = float(lat)
        lng = float(lng)
    except (TypeError, ValueError):
        return False
    return (math.isfinite(lat) and math.isfinite(lng) and
            -90 <= lat <= 90 and -180 <= lng <= 180)


def calculate_bounds(features, padding_fraction=0.1):
    """
    Bounding box around features, padded by a fraction of its span.

    Returns None for an empty collection, otherwise
    {'north_east': (lat, lon), 'south_west': (lat, lon)}.
    """
    features = list(features)
    if not features:
        return None

    lats = [f.latitude for f in features]
    lons = [f.longitude for f in features]
    min_lat, max_lat = min(lats), max(lats)
    min_lon, max_lon = min(lons), max(lons)

    lat_padding = (max_lat - min_lat) * padding_fraction
    lon_padding = (max_lon - min_lon) * padding_fraction

    return {
        'north_east': (max_lat + lat_padding, max_lon + lon_padding),
        'south_west': (min_lat - lat_padding, min_lon - lon_padding),
    }


def get_center(features):
    """Mean latitude/longitude of the features, or the default map center."""
    features = list(features)
    if not features:
        return DEFAULT_MAP_CENTER

    total_lat = sum(f.latitude for f in features)
    total_lon = sum(f.longitude for f in features)
    return (total_lat / len(features), total_lon / len(features))


def find_within_radius(features, center, radius_km):
    """Features whose distance to center is at most radius_km, in input order."""
    return [f for f in features if distance_km(center, f) <= radius_km]


def generate_pipeline_network(assets, max_link_km=PIPELINE_MAX_LINK_KM):
    """
    Link each production plant to its nearest storage asset.

    Returns a list of ((plant_lat, plant_lon), (storage_lat, storage_lon))
    segments; plants with no storage closer than max_link_km stay unlinked.
    """
    plants = [a for a in assets if a.type is AssetType.PLANT]
    storage = [a for a in assets if a.type is AssetType.STORAGE]

    pipelines = []
    for plant in plants:
        nearest = None
        min_distance = math.inf
        for site in storage:
            d = distance_km(plant, site)
            if d < min_distance:
                min_distance = d
                nearest = site

        if nearest is not None and min_distance < max_link_km:
            pipelines.append((
                (plant.latitude, plant.longitude),
                (nearest.latitude, nearest.longitude),
            ))

    return pipelines


def format_coordinates(lat, lng):
    """Format a coordinate pair for display, e.g. '22.3452°N, 69.8596°E'."""
    lat_direction = 'N' if lat >= 0 else 'S'
    lng_direction = 'E' if lng >= 0 else 'W'
    return f"{abs(lat):.4f}°{lat_direction}, {abs(lng):.4f}°{lng_direction}"
