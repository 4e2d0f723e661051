#!/usr/bin/env python3
"""
Test fixtures and data generators for H2 Site Optimization Model tests
"""

import os
import tempfile
import shutil
import numpy as np
import pandas as pd
import geopandas as gpd
from shapely.geometry import Point

from h2_site_entities import DemandCenter, HydrogenAsset, RenewableSource


class TestDataGenerator:
    """Generate reproducible reference collections for H2 site model tests"""

    __test__ = False  # not a test class despite the name

    def __init__(self, seed=42):
        """Initialize with random seed for reproducible test data"""
        self.rng = np.random.default_rng(seed)
        self.india_bounds = {
            'west': 68.0,
            'east': 97.0,
            'south': 8.0,
            'north': 37.0
        }

    def _random_location(self, bounds=None):
        bounds = bounds or self.india_bounds
        lat = float(self.rng.uniform(bounds['south'], bounds['north']))
        lon = float(self.rng.uniform(bounds['west'], bounds['east']))
        return lat, lon

    def generate_assets(self, n_assets=6, bounds=None):
        """Generate hydrogen assets with a mix of types and statuses"""
        types = ['plant', 'storage', 'pipeline', 'hub']
        statuses = ['operational', 'under_construction', 'planned']
        assets = []
        for i in range(n_assets):
            lat, lon = self._random_location(bounds)
            assets.append(HydrogenAsset(
                latitude=lat,
                longitude=lon,
                type=types[i % len(types)],
                status=statuses[i % len(statuses)],
                name=f'Test Asset {i+1}',
            ))
        return assets

    def generate_renewables(self, n_sources=5, bounds=None):
        """Generate renewable sources (solar, wind, hydro)"""
        types = ['solar', 'wind', 'hydro']
        sources = []
        for i in range(n_sources):
            lat, lon = self._random_location(bounds)
            sources.append(RenewableSource(
                latitude=lat,
                longitude=lon,
                type=types[i % len(types)],
                name=f'Test Renewable {i+1}',
            ))
        return sources

    def generate_demand_centers(self, n_centers=4, bounds=None):
        """Generate demand centers; every third center has no annual demand figure"""
        priorities = ['high', 'medium', 'low']
        centers = []
        for i in range(n_centers):
            lat, lon = self._random_location(bounds)
            annual_demand = None if i % 3 == 2 else float(self.rng.integers(1000, 20000))
            centers.append(DemandCenter(
                latitude=lat,
                longitude=lon,
                priority=priorities[i % len(priorities)],
                annual_demand=annual_demand,
                name=f'Test Demand Center {i+1}',
            ))
        return centers

    def generate_reference_set(self, n_assets=6, n_sources=5, n_centers=4, bounds=None):
        """All three collections in one dict keyed like load_reference_data()"""
        return {
            'assets': self.generate_assets(n_assets, bounds),
            'renewables': self.generate_renewables(n_sources, bounds),
            'demand_centers': self.generate_demand_centers(n_centers, bounds),
        }

    def generate_points(self, n_points=50, bounds=None):
        """Random (lat, lon) tuples inside bounds"""
        return [self._random_location(bounds) for _ in range(n_points)]


class TestFileManager:
    """Write reference collections to temporary CSV/GeoJSON files"""

    __test__ = False

    def __init__(self):
        self.temp_dir = tempfile.mkdtemp()

    def cleanup(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def path(self, filename):
        return os.path.join(self.temp_dir, filename)

    def write_csv(self, filename, entities, lat_col='latitude', lon_col='longitude'):
        df = pd.DataFrame([e.to_dict() for e in entities])
        df = df.rename(columns={'latitude': lat_col, 'longitude': lon_col})
        path = self.path(filename)
        df.to_csv(path, index=False)
        return path

    def write_geojson(self, filename, entities):
        records = [e.to_dict() for e in entities]
        gdf = gpd.GeoDataFrame(
            pd.DataFrame(records).drop(columns=['latitude', 'longitude']).dropna(axis=1, how='all'),
            geometry=[Point(r['longitude'], r['latitude']) for r in records],
            crs="EPSG:4326",
        )
        path = self.path(filename)
        gdf.to_file(path, driver="GeoJSON")
        return path


def quiet_config(**overrides):
    """Default configuration with progress output disabled"""
    from h2_site_config import get_default_config
    config = get_default_config()
    config['verbose_logging'] = False
    config.update(overrides)
    return config
