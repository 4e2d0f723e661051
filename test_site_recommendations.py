#!/usr/bin/env python3
"""
Unit tests for investment range parsing and recommendation generation
"""

import unittest
import os
import sys
import math
from unittest.mock import patch

# Add the project directory to the Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from h2_site_data import get_seed_reference_data
from h2_site_entities import InvalidCriteriaError, SiteFactors
from h2_site_model import H2SiteOptimizationModel
from site_recommendations import (
    CURATED_CANDIDATE_POOL,
    curated_recommendations,
    factor_tags,
    generate_recommendations,
    parse_investment_range,
)
from test_fixtures import quiet_config


class TestInvestmentRange(unittest.TestCase):

    def test_lakh_ranges(self):
        self.assertEqual(parse_investment_range('₹10L - ₹50L'), (1_000_000, 5_000_000))
        self.assertEqual(parse_investment_range('₹50L - ₹100L'), (5_000_000, 10_000_000))

    def test_open_ended_range(self):
        self.assertEqual(parse_investment_range('₹100L+'), (10_000_000, math.inf))

    def test_crore_ranges(self):
        self.assertEqual(parse_investment_range('₹300Cr - ₹420Cr'), (3_000_000_000, 4_200_000_000))
        self.assertEqual(parse_investment_range('₹1.5 crore+'), (15_000_000, math.inf))

    def test_unparseable_means_unconstrained(self):
        self.assertEqual(parse_investment_range('any budget'), (0.0, math.inf))


class TestCuratedRecommendations(unittest.TestCase):

    def test_open_range_returns_whole_pool_by_score(self):
        recommendations = curated_recommendations('renewable_proximity', '₹100L+')
        self.assertEqual([r['name'] for r in recommendations],
                         ['Gujarat Industrial Corridor', 'Tamil Nadu Coastal Hub', 'Rajasthan Solar Zone'])
        self.assertEqual([r['score'] for r in recommendations], [92, 87, 84])

    def test_range_filters_by_estimated_cost(self):
        recommendations = curated_recommendations('market_demand', '₹300Cr - ₹420Cr')
        self.assertEqual([r['name'] for r in recommendations],
                         ['Tamil Nadu Coastal Hub', 'Rajasthan Solar Zone'])

    def test_small_range_matches_nothing(self):
        self.assertEqual(curated_recommendations('market_demand', '₹10L - ₹50L'), [])

    def test_record_shape(self):
        record = curated_recommendations('cost_optimization', '₹100L+')[0]
        self.assertEqual(record['location'], {'latitude': 23.5, 'longitude': 70.5})
        self.assertEqual(record['estimated_cost'], 4_580_000_000)
        self.assertEqual(record['timeline'], '18 months')
        self.assertEqual(record['criteria'], ['cost_optimization'])
        self.assertEqual(record['investment_range'], '₹100L+')

    def test_pool_is_not_modified(self):
        before = [dict(site) for site in CURATED_CANDIDATE_POOL]
        curated_recommendations('market_demand', '₹100L+')[0]['tags'].append('Edited')
        self.assertEqual(before, [dict(site) for site in CURATED_CANDIDATE_POOL])


class TestGenerateRecommendations(unittest.TestCase):

    def test_investment_range_required(self):
        for label in ('', '   ', None):
            with self.assertRaises(ValueError):
                generate_recommendations('market_demand', label)

    def test_unknown_criteria(self):
        with self.assertRaises(InvalidCriteriaError):
            generate_recommendations('lowest_risk', '₹100L+')

    def test_truncation(self):
        self.assertEqual(len(generate_recommendations('market_demand', '₹100L+', number_of_sites=1)), 1)
        self.assertEqual(generate_recommendations('market_demand', '₹100L+', number_of_sites=0), [])
        with self.assertRaises(ValueError):
            generate_recommendations('market_demand', '₹100L+', number_of_sites=-2)

    def test_unknown_source(self):
        with self.assertRaises(ValueError):
            generate_recommendations('market_demand', '₹100L+', source='survey')

    def test_grid_source_requires_model(self):
        with self.assertRaises(ValueError):
            generate_recommendations('market_demand', '₹100L+', source='grid')

    def test_grid_source(self):
        seed = get_seed_reference_data()
        config = quiet_config(grid_bounds={'min_lat': 20.0, 'max_lat': 25.0, 'min_lon': 68.0, 'max_lon': 73.0})
        model = H2SiteOptimizationModel(seed['assets'], seed['renewables'], seed['demand_centers'], config=config)

        recommendations = generate_recommendations('market_demand', '₹10L - ₹50L', number_of_sites=3,
                                                   source='grid', model=model)
        self.assertEqual(len(recommendations), 3)
        for record, site in zip(recommendations, model.site_scores):
            self.assertTrue(record['name'].startswith('Candidate Site '))
            self.assertEqual(record['score'], site.composite_score)
            self.assertIsNone(record['estimated_cost'])
            self.assertEqual(record['criteria'], ['market_demand'])


    def test_grid_source_reuses_computed_sites(self):
        seed = get_seed_reference_data()
        config = quiet_config(grid_bounds={'min_lat': 20.0, 'max_lat': 25.0, 'min_lon': 68.0, 'max_lon': 73.0})
        model = H2SiteOptimizationModel(seed['assets'], seed['renewables'], seed['demand_centers'], config=config)
        sites = model.find_optimal_sites('transport_access', number_of_sites=4)

        with patch.object(model, 'find_optimal_sites') as mock_search:
            recommendations = generate_recommendations('transport_access', '₹100L+', number_of_sites=4,
                                                       source='grid', model=model, site_scores=sites)
        mock_search.assert_not_called()
        self.assertEqual([r['score'] for r in recommendations], [s.composite_score for s in sites])

        without_model = generate_recommendations('transport_access', '₹100L+', source='grid', site_scores=sites)
        self.assertEqual(len(without_model), 4)


class TestFactorTags(unittest.TestCase):

    def test_tags_strongest_first(self):
        factors = SiteFactors(75.0, 90.0, 50.0, 20.0, 72.0)
        self.assertEqual(factor_tags(factors), ['High Demand', 'Near Renewables', 'Regulatory Fit'])

    def test_threshold_is_inclusive(self):
        factors = SiteFactors(70.0, 0.0, 0.0, 0.0, 0.0)
        self.assertEqual(factor_tags(factors), ['Near Renewables'])
        self.assertEqual(factor_tags(factors, threshold=80.0), [])


if __name__ == '__main__':
    unittest.main()
