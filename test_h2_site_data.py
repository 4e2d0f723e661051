#!/usr/bin/env python3
"""
Unit tests for reference data loading and seed data
"""

import unittest
import os
import sys
import io
from contextlib import redirect_stdout
import pandas as pd
import geopandas as gpd
from shapely.geometry import Point, Polygon

# Add the project directory to the Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from h2_site_data import (
    SEED_ASSETS,
    get_seed_reference_data,
    load_reference_data,
    load_reference_file,
)
from h2_site_entities import DemandCenter, HydrogenAsset, RenewableSource
from test_fixtures import TestDataGenerator, TestFileManager


class TestSeedData(unittest.TestCase):

    def test_seed_collections(self):
        data = get_seed_reference_data()
        self.assertEqual(len(data['assets']), 4)
        self.assertEqual(len(data['renewables']), 3)
        self.assertEqual(len(data['demand_centers']), 3)
        self.assertTrue(all(isinstance(a, HydrogenAsset) for a in data['assets']))

    def test_seed_statuses(self):
        statuses = {a.name: a.status.value for a in get_seed_reference_data()['assets']}
        self.assertEqual(statuses['Dahej Storage Terminal'], 'operational')
        self.assertEqual(statuses['Mundra Hydrogen Hub'], 'planned')

    def test_seed_records_are_fresh_each_call(self):
        first = get_seed_reference_data()
        first['assets'].clear()
        self.assertEqual(len(get_seed_reference_data()['assets']), len(SEED_ASSETS))


class TestLoadReferenceFile(unittest.TestCase):

    def setUp(self):
        self.files = TestFileManager()
        self.generator = TestDataGenerator(seed=11)

    def tearDown(self):
        self.files.cleanup()

    def test_csv_with_abbreviated_columns(self):
        centers = self.generator.generate_demand_centers(4)
        path = self.files.write_csv('demand.csv', centers, lat_col='Lat', lon_col='Long')

        with redirect_stdout(io.StringIO()):
            loaded = load_reference_file(path, 'demand_centers')

        self.assertEqual(len(loaded), 4)
        self.assertTrue(all(isinstance(c, DemandCenter) for c in loaded))
        for original, restored in zip(centers, loaded):
            self.assertAlmostEqual(original.latitude, restored.latitude, places=9)
            self.assertEqual(original.priority, restored.priority)
            self.assertEqual(original.annual_demand, restored.annual_demand)

    def test_geojson(self):
        sources = self.generator.generate_renewables(3)
        path = self.files.write_geojson('renewables.geojson', sources)

        with redirect_stdout(io.StringIO()):
            loaded = load_reference_file(path, 'renewables')

        self.assertEqual([s.type for s in loaded], [s.type for s in sources])
        self.assertTrue(all(isinstance(s, RenewableSource) for s in loaded))
        self.assertAlmostEqual(loaded[0].longitude, sources[0].longitude, places=6)

    def test_projected_layer_is_reprojected(self):
        gdf = gpd.GeoDataFrame(
            {'type': ['plant'], 'status': ['operational']},
            geometry=[Point(70.0, 22.0)],
            crs="EPSG:4326",
        ).to_crs("EPSG:3857")
        path = self.files.path('assets.gpkg')
        gdf.to_file(path, driver="GPKG")

        with redirect_stdout(io.StringIO()):
            loaded = load_reference_file(path, 'assets')

        self.assertAlmostEqual(loaded[0].latitude, 22.0, places=6)
        self.assertAlmostEqual(loaded[0].longitude, 70.0, places=6)

    def test_polygons_use_centroid(self):
        gdf = gpd.GeoDataFrame(
            {'type': ['solar']},
            geometry=[Polygon([(70, 20), (72, 20), (72, 22), (70, 22)])],
            crs="EPSG:4326",
        )
        path = self.files.path('parks.gpkg')
        gdf.to_file(path, driver="GPKG")

        with redirect_stdout(io.StringIO()):
            loaded = load_reference_file(path, 'renewables')

        self.assertAlmostEqual(loaded[0].latitude, 21.0, places=6)
        self.assertAlmostEqual(loaded[0].longitude, 71.0, places=6)

    def test_errors(self):
        with self.assertRaises(FileNotFoundError):
            load_reference_file(self.files.path('missing.csv'), 'assets')

        path = self.files.path('assets.txt')
        with open(path, 'w') as f:
            f.write('latitude,longitude\n')
        with self.assertRaises(ValueError):
            load_reference_file(path, 'assets')

        with self.assertRaises(ValueError):
            load_reference_file(path, 'pipelines')

        no_coords = self.files.path('no_coords.csv')
        pd.DataFrame({'name': ['A'], 'type': ['plant']}).to_csv(no_coords, index=False)
        with self.assertRaises(ValueError):
            load_reference_file(no_coords, 'assets')


class TestLoadReferenceData(unittest.TestCase):

    def setUp(self):
        self.files = TestFileManager()

    def tearDown(self):
        self.files.cleanup()

    def test_seed_fallback(self):
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            data = load_reference_data()
        self.assertEqual(len(data['assets']), 4)
        self.assertIn('Using seed assets', buffer.getvalue())

    def test_file_overrides_one_collection(self):
        assets = TestDataGenerator(seed=5).generate_assets(2)
        path = self.files.write_csv('assets.csv', assets)

        with redirect_stdout(io.StringIO()):
            data = load_reference_data(assets_file=path)

        self.assertEqual(len(data['assets']), 2)
        self.assertEqual(len(data['renewables']), 3)


if __name__ == '__main__':
    unittest.main()
