#!/usr/bin/env python3
"""
Reference data loading for the H2 site optimization model.

Reference collections can come from CSV files (lat/lon columns detected
flexibly), GeoJSON/Shapefile layers, or the built-in seed data covering
western and southern India.
"""

import os
import warnings
import pandas as pd
import geopandas as gpd

from h2_site_entities import (
    assets_from_records,
    demand_centers_from_records,
    renewables_from_records,
)

REFERENCE_KINDS = ('assets', 'renewables', 'demand_centers')

_RECORD_BUILDERS = {
    'assets': assets_from_records,
    'renewables': renewables_from_records,
    'demand_centers': demand_centers_from_records,
}

SEED_ASSETS = [
    {
        'name': 'Jamnagar Green Hydrogen Plant',
        'type': 'plant',
        'subtype': 'electrolysis',
        'latitude': 22.34516,
        'longitude': 69.85960,
        'capacity': '200 MW',
        'status': 'under_construction',
        'annual_output': '18,000 tons H2/year',
        'investment_cost': 6_250_000_000,
        'owner': 'Reliance Industries',
        'description': 'Large-scale green hydrogen production facility at Jamnagar refinery complex',
    },
    {
        'name': 'Mundra Hydrogen Hub',
        'type': 'plant',
        'subtype': 'electrolysis',
        'latitude': 22.7460,
        'longitude': 69.7000,
        'capacity': '300 MW',
        'status': 'planned',
        'annual_output': '25,000 tons H2/year',
        'investment_cost': 10_000_000_000,
        'owner': 'Adani Green Energy',
        'description': 'Integrated green hydrogen production and export facility at Mundra Port',
    },
    {
        'name': 'Dahej Storage Terminal',
        'type': 'storage',
        'latitude': 21.7294,
        'longitude': 72.6642,
        'capacity': '800 tons',
        'status': 'operational',
        'investment_cost': 2_900_000_000,
        'owner': 'GAIL India',
        'description': 'Industrial hydrogen storage facility at Dahej petrochemical complex',
    },
    {
        'name': 'Visakhapatnam Storage Hub',
        'type': 'storage',
        'latitude': 17.6868,
        'longitude': 83.2185,
        'capacity': '600 tons',
        'status': 'under_construction',
        'investment_cost': 2_330_000_000,
        'owner': 'HPCL',
        'description': 'Coastal hydrogen storage and distribution hub',
    },
]

SEED_RENEWABLES = [
    {'name': 'Bhadla Solar Park', 'type': 'solar', 'latitude': 27.4720, 'longitude': 71.9600,
     'capacity': '2.25 GW', 'status': 'operational', 'owner': 'Solar Energy Corporation of India'},
    {'name': 'Charanka Solar Park', 'type': 'solar', 'latitude': 23.9080, 'longitude': 71.2160,
     'capacity': '790 MW', 'status': 'operational', 'owner': 'Gujarat Solar Park'},
    {'name': 'Bhuj Wind Cluster', 'type': 'wind', 'latitude': 23.1312, 'longitude': 68.9296,
     'capacity': '1.2 GW', 'status': 'operational', 'owner': 'Kutch Wind Power'},
]

SEED_DEMAND_CENTERS = [
    {'name': 'Deendayal Port Authority', 'type': 'transportation', 'latitude': 23.017,
     'longitude': 70.217, 'annual_demand': 15000, 'priority': 'high'},
    {'name': 'Tuticorin Port Industrial Complex', 'type': 'industrial', 'latitude': 8.7642,
     'longitude': 78.1348, 'annual_demand': 10000, 'priority': 'high'},
    {'name': 'Paradeep Port Steel Hub', 'type': 'industrial', 'latitude': 20.2869,
     'longitude': 86.6740, 'annual_demand': 12000, 'priority': 'medium'},
]


def get_seed_reference_data():
    """Seeded reference collections as entity lists keyed by kind."""
    return {
        'assets': assets_from_records(SEED_ASSETS),
        'renewables': renewables_from_records(SEED_RENEWABLES),
        'demand_centers': demand_centers_from_records(SEED_DEMAND_CENTERS),
    }


def _find_column(columns, *candidates):
    """First column whose lowercase name matches, or contains, a candidate."""
    lowered = {c.lower(): c for c in columns}
    for candidate in candidates:
        if candidate in lowered:
            return lowered[candidate]
    for candidate in candidates:
        for lower, original in lowered.items():
            if candidate in lower:
                return original
    return None


def _read_csv_records(path):
    df = pd.read_csv(path)

    lat_col = _find_column(df.columns, 'latitude', 'lat')
    if lat_col is None:
        raise ValueError(f"No latitude column found in {path}")
    lon_col = _find_column(df.columns, 'longitude', 'lon', 'lng', 'long')
    if lon_col is None:
        raise ValueError(f"No longitude column found in {path}")

    df = df.rename(columns={lat_col: 'latitude', lon_col: 'longitude'})
    return df


def _read_spatial_records(path):
    with warnings.catch_warnings():
        warnings.simplefilter('ignore')
        gdf = gpd.read_file(path)

    if gdf.crs is not None and gdf.crs.to_epsg() != 4326:
        print(f"  Converting {os.path.basename(path)} from {gdf.crs} to EPSG:4326")
        gdf = gdf.to_crs("EPSG:4326")

    if not gdf.geometry.geom_type.eq('Point').all():
        # Polygons and lines are represented by their centroid
        gdf = gdf.copy()
        gdf['geometry'] = gdf.geometry.centroid

    df = pd.DataFrame(gdf.drop(columns='geometry'))
    df['latitude'] = gdf.geometry.y.values
    df['longitude'] = gdf.geometry.x.values
    return df


def load_reference_file(path, kind):
    """
    Load one reference collection from CSV, GeoJSON or Shapefile.

    Parameters
    ----------
    path : str
        File to read. CSV needs latitude/longitude columns (case-insensitive,
        abbreviations accepted); spatial formats use point geometry.
    kind : {'assets', 'renewables', 'demand_centers'}
    """
    if kind not in _RECORD_BUILDERS:
        raise ValueError(f"Unknown reference kind: {kind} (expected one of {', '.join(REFERENCE_KINDS)})")
    if not os.path.exists(path):
        raise FileNotFoundError(f"Reference file not found: {path}")

    ext = os.path.splitext(path)[1].lower()
    if ext == '.csv':
        df = _read_csv_records(path)
    elif ext in ('.geojson', '.json', '.shp', '.gpkg'):
        df = _read_spatial_records(path)
    else:
        raise ValueError(f"Unsupported reference file format: {ext}")

    records = _RECORD_BUILDERS[kind](df)
    print(f"  Loaded {len(records)} {kind.replace('_', ' ')} from {os.path.basename(path)}")
    return records


def load_reference_data(assets_file=None, renewables_file=None, demand_centers_file=None):
    """
    Load all three reference collections, using seed data for any file not given.
    """
    data = get_seed_reference_data()
    files = {
        'assets': assets_file,
        'renewables': renewables_file,
        'demand_centers': demand_centers_file,
    }
    for kind, path in files.items():
        if path:
            data[kind] = load_reference_file(path, kind)
        else:
            print(f"  Using seed {kind.replace('_', ' ')} ({len(data[kind])} records)")
    return data
