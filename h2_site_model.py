#!/usr/bin/env python3
"""
Grid-Search Hydrogen Infrastructure Site Optimization Model
"""

import os
import json
import math
import warnings
import numpy as np
import pandas as pd
import geopandas as gpd
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from scipy.spatial import cKDTree
from shapely.geometry import Point
import matplotlib.pyplot as plt

from h2_site_config import get_default_config, validate_config
from h2_site_entities import GeoPoint, InvalidCoordinateError, parse_criteria, validate_coordinates
from site_geometry import EARTH_RADIUS_KM, haversine_km, to_unit_vectors
from site_scoring import FACTOR_NAMES, ReferenceSet, build_site_score, factors_in_bounds

# Lattice points closer than this to any existing asset would duplicate it
EXCLUSION_RADIUS_KM = 10.0

# Slack added to the KD-tree search radius before the exact haversine check
_KDTREE_MARGIN_KM = 1e-3

DEFAULT_BOUNDS = {'min_lat': 8.0, 'max_lat': 37.0, 'min_lon': 68.0, 'max_lon': 97.0}
DEFAULT_STEP_DEGREES = 0.2

warnings.filterwarnings('ignore', category=UserWarning, module='geopandas')


class NumpyEncoder(json.JSONEncoder):
    """JSON encoder for numpy scalars and arrays."""

    def default(self, obj):
        if isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.ndarray):
            return obj.tolist()
        return super(NumpyEncoder, self).default(obj)


def normalize_bounds(bounds=None):
    """Validate a bounding box dict and fill defaults for missing keys."""
    resolved = {**DEFAULT_BOUNDS, **(bounds or {})}
    try:
        validate_coordinates(resolved['min_lat'], resolved['min_lon'])
        validate_coordinates(resolved['max_lat'], resolved['max_lon'])
    except InvalidCoordinateError as e:
        raise InvalidCoordinateError(f"Invalid grid bounds: {e}") from None

    resolved = {k: float(resolved[k]) for k in DEFAULT_BOUNDS}
    if resolved['min_lat'] > resolved['max_lat']:
        raise ValueError("Grid bounds min_lat must not exceed max_lat")
    if resolved['min_lon'] > resolved['max_lon']:
        raise ValueError("Grid bounds min_lon must not exceed max_lon")
    return resolved


def _axis_values(start, stop, step):
    # Index-based so long sweeps do not accumulate floating point drift
    count = int(math.floor((stop - start) / step + 1e-9)) + 1
    return np.round(start + np.arange(count) * step, 10)


def generate_lattice(bounds=None, step_degrees=DEFAULT_STEP_DEGREES):
    """
    Regular lat/lon lattice over the bounds, both ends inclusive.

    Points are enumerated row-major: latitude is the outer loop and longitude
    the inner loop, both ascending. Returns two flat arrays (lats, lons).
    """
    bounds = normalize_bounds(bounds)
    step = float(step_degrees)
    if not math.isfinite(step) or step <= 0:
        raise ValueError(f"step_degrees must be a positive number, got {step_degrees!r}")

    lat_axis = _axis_values(bounds['min_lat'], bounds['max_lat'], step)
    lon_axis = _axis_values(bounds['min_lon'], bounds['max_lon'], step)
    lat_grid, lon_grid = np.meshgrid(lat_axis, lon_axis, indexing='ij')
    return lat_grid.ravel(), lon_grid.ravel()


class H2SiteOptimizationModel:
    """
    Ranks candidate hydrogen infrastructure sites on a lat/lon lattice.

    Reference collections are injected at construction and treated as a
    read-only snapshot; the model keeps only the results of its last run.
    """

    def __init__(self, assets=(), renewables=(), demand_centers=(), config=None):
        """Initialize model with reference collections and configuration."""
        self.config = config or self._default_config()
        self._validate_config()

        self.references = ReferenceSet(assets, renewables, demand_centers)

        self.site_scores = None
        self.lattice_scores = None
        self.optimization_results = None

        # Cache structures
        self._asset_tree = None

    def _default_config(self):
        return get_default_config()

    def _validate_config(self):
        errors = validate_config(self.config)
        if errors:
            details = '; '.join(f"{k}: {v}" for k, v in errors.items())
            raise ValueError(f"Configuration validation failed: {details}")
        return True

    def _log(self, message):
        if self.config.get('verbose_logging', True):
            print(message)

    @property
    def assets(self):
        return self.references.assets

    @property
    def renewables(self):
        return self.references.renewables

    @property
    def demand_centers(self):
        return self.references.demand_centers

    def score_site(self, point, criteria):
        """Score one point against the model's reference collections."""
        return self.references.score_site(point, criteria)

    # ------------------------------------------------------------------
    # Candidate generation
    # ------------------------------------------------------------------

    def _build_asset_index(self):
        """Build (once) a KD-tree over asset unit vectors."""
        if self._asset_tree is None and len(self.references.asset_lats):
            self._asset_tree = cKDTree(
                to_unit_vectors(self.references.asset_lats, self.references.asset_lons))
        return self._asset_tree

    def _exclusion_mask(self, lats, lons, radius_km=EXCLUSION_RADIUS_KM):
        """
        True for lattice points strictly closer than radius_km to any asset.

        The KD-tree narrows the search to assets within a slightly padded
        chord radius; membership is then decided by exact haversine distance.
        """
        excluded = np.zeros(len(lats), dtype=bool)
        tree = self._build_asset_index()
        if tree is None or len(lats) == 0:
            return excluded

        search_chord = 2 * math.sin((radius_km + _KDTREE_MARGIN_KM) / (2 * EARTH_RADIUS_KM))
        neighbours = tree.query_ball_point(to_unit_vectors(lats, lons), r=search_chord)

        asset_lats = self.references.asset_lats
        asset_lons = self.references.asset_lons
        for i, hits in enumerate(neighbours):
            if not hits:
                continue
            d = haversine_km(lats[i], lons[i], asset_lats[hits], asset_lons[hits])
            excluded[i] = bool((d < radius_km).any())

        return excluded

    def _score_lattice(self, lats, lons, criteria):
        """Score points in chunks, optionally on a thread pool, preserving order."""
        if len(lats) == 0:
            return np.zeros(0, dtype=int), np.zeros((0, len(FACTOR_NAMES)))

        batch_size = int(self.config.get('scoring_batch_size', 5000))
        chunks = [(lats[i:i + batch_size], lons[i:i + batch_size])
                  for i in range(0, len(lats), batch_size)]

        def score_chunk(chunk):
            return self.references.score_points(chunk[0], chunk[1], criteria)

        if self.config.get('parallel_processing', False) and len(chunks) > 1:
            # executor.map yields in submission order, keeping the lattice order intact
            with ThreadPoolExecutor(max_workers=self.config.get('max_workers', 4)) as executor:
                results = list(executor.map(score_chunk, chunks))
        else:
            results = [score_chunk(chunk) for chunk in chunks]

        composites = np.concatenate([r[0] for r in results])
        factors = np.vstack([r[1] for r in results])
        return composites, factors

    def find_optimal_sites(self, criteria, number_of_sites=None, bounds=None, step_degrees=None):
        """
        Sweep the lattice, drop points near existing assets and return the
        best-scoring sites.

        Parameters
        ----------
        criteria : str or OptimizationCriteria
            Selects the factor weight row.
        number_of_sites : int, optional
            Maximum number of sites returned (config default_number_of_sites).
        bounds : dict, optional
            min_lat/max_lat/min_lon/max_lon (config grid_bounds).
        step_degrees : float, optional
            Lattice spacing (config grid_step_degrees).

        Returns
        -------
        list of SiteScore sorted by composite score, highest first. Equal
        scores keep lattice enumeration order.
        """
        criteria = parse_criteria(criteria)
        if number_of_sites is None:
            number_of_sites = self.config.get('default_number_of_sites', 10)
        if int(number_of_sites) != number_of_sites or number_of_sites < 0:
            raise ValueError(f"number_of_sites must be a non-negative integer, got {number_of_sites!r}")
        number_of_sites = int(number_of_sites)

        bounds = normalize_bounds(bounds if bounds is not None else self.config.get('grid_bounds'))
        if step_degrees is None:
            step_degrees = self.config.get('grid_step_degrees', DEFAULT_STEP_DEGREES)

        self._log(f"\nFinding optimal sites using {criteria.value} criteria...")
        self._warn_empty_references()

        lats, lons = generate_lattice(bounds, step_degrees)
        self._log(f"  Generated {len(lats)} lattice points at {step_degrees} degree spacing")

        excluded = self._exclusion_mask(lats, lons)
        lats, lons = lats[~excluded], lons[~excluded]
        self._log(f"  Excluded {int(excluded.sum())} points within {EXCLUSION_RADIUS_KM:g} km of existing assets")

        composites, factors = self._score_lattice(lats, lons, criteria)

        order = np.argsort(-composites, kind='stable')[:number_of_sites]
        self.site_scores = [
            build_site_score(_lattice_point(lats[i], lons[i]), composites[i], factors[i])
            for i in order
        ]
        self.lattice_scores = pd.DataFrame({
            'latitude': lats,
            'longitude': lons,
            'score': composites,
        })
        self.optimization_results = {
            'criteria': criteria.value,
            'bounds': bounds,
            'step_degrees': float(step_degrees),
            'number_of_sites_requested': number_of_sites,
            'lattice_points': int(len(excluded)),
            'excluded_points': int(excluded.sum()),
            'eligible_points': int(len(lats)),
        }

        if self.site_scores:
            self._log(f"  Top site: {self.site_scores[0].latitude:.2f}, "
                      f"{self.site_scores[0].longitude:.2f} (score {self.site_scores[0].composite_score})")
        self._log(f"  Returning {len(self.site_scores)} of {len(lats)} eligible sites")

        return self.site_scores

    def _warn_empty_references(self):
        messages = {
            'assets': "No hydrogen assets supplied; cost optimization uses the neutral score",
            'renewables': "No renewable sources supplied; renewable proximity scores 0",
            'demand_centers': "No demand centers supplied; market demand, transport and regulatory factors score 0",
        }
        for name in self.references.empty_collections:
            self._log(f"  Warning: {messages[name]}")

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def results_to_dataframe(self, site_scores=None):
        """Ranked results as a DataFrame with one column per factor."""
        site_scores = self.site_scores if site_scores is None else site_scores
        columns = ['rank', 'latitude', 'longitude', 'score', *FACTOR_NAMES]
        if not site_scores:
            return pd.DataFrame(columns=columns)

        rows = []
        for rank, site in enumerate(site_scores, start=1):
            row = {
                'rank': rank,
                'latitude': site.latitude,
                'longitude': site.longitude,
                'score': site.composite_score,
            }
            row.update(site.factors.to_dict())
            rows.append(row)
        return pd.DataFrame(rows, columns=columns)

    def validate_results(self):
        """Check the last run's output against the scoring invariants."""
        issues = []
        if self.site_scores is None:
            return {'passed': False, 'issues': ['No results. Run find_optimal_sites() first.']}

        scores = [s.composite_score for s in self.site_scores]
        if any(not (0 <= s <= 100) for s in scores):
            issues.append('Composite score outside 0-100')
        if any(not factors_in_bounds(s.factors) for s in self.site_scores):
            issues.append('Factor score outside 0-100 or not finite')
        if scores != sorted(scores, reverse=True):
            issues.append('Sites not sorted by descending score')
        if len(scores) > self.optimization_results['number_of_sites_requested']:
            issues.append('More sites returned than requested')

        return {'passed': not issues, 'issues': issues}

    def build_analysis_export(self, recommendations=None):
        """Snapshot of the reference collections and recommendations for download."""
        recommendations = list(recommendations or [])
        return {
            'timestamp': datetime.now().isoformat(),
            'summary': {
                'total_assets': len(self.assets),
                'total_renewables': len(self.renewables),
                'total_demand_centers': len(self.demand_centers),
                'total_recommendations': len(recommendations),
            },
            'assets': [a.to_dict() for a in self.assets],
            'renewables': [r.to_dict() for r in self.renewables],
            'demand_centers': [d.to_dict() for d in self.demand_centers],
            'recommendations': recommendations,
        }

    def export_results(self, output_dir="h2_site_outputs", recommendations=None):
        """Export ranked sites to CSV/GeoJSON plus JSON summary and analysis files."""
        if not self.site_scores:
            print("No results to export. Run find_optimal_sites() first.")
            return None

        os.makedirs(output_dir, exist_ok=True)
        paths = {}

        max_sites = self.config.get('max_exported_sites', 100)
        results_df = self.results_to_dataframe(self.site_scores[:max_sites])

        if self.config.get('export_csv', True):
            paths['csv'] = os.path.join(output_dir, 'site_scores.csv')
            results_df.to_csv(paths['csv'], index=False)

        if self.config.get('export_geojson', True):
            paths['geojson'] = os.path.join(output_dir, 'site_scores.geojson')
            sites_gdf = gpd.GeoDataFrame(
                results_df,
                geometry=[Point(lon, lat) for lat, lon in zip(results_df['latitude'], results_df['longitude'])],
                crs="EPSG:4326",
            )
            sites_gdf.to_file(paths['geojson'], driver="GeoJSON")

        summary = {
            'optimization_summary': {
                'timestamp': datetime.now().isoformat(),
                'model_name': self.config.get('model_name'),
                **self.optimization_results,
                'sites_returned': len(self.site_scores),
            },
            'validation': self.validate_results(),
            'top_sites': [s.to_dict() for s in self.site_scores[:max_sites]],
        }
        paths['summary'] = os.path.join(output_dir, 'optimization_summary.json')
        with open(paths['summary'], 'w', encoding='utf-8') as f:
            json.dump(summary, f, indent=2, cls=NumpyEncoder)

        paths['analysis'] = os.path.join(output_dir, 'hydrogen-infrastructure-analysis.json')
        with open(paths['analysis'], 'w', encoding='utf-8') as f:
            json.dump(self.build_analysis_export(recommendations), f, indent=2,
                      cls=NumpyEncoder, ensure_ascii=False)

        for kind, path in paths.items():
            self._log(f"  {kind} exported to: {path}")
        return paths

    def create_visualizations(self, output_dir="h2_site_outputs"):
        """Plot the scored lattice with reference collections and top sites."""
        if self.lattice_scores is None or self.lattice_scores.empty:
            print("No lattice scores to plot. Run find_optimal_sites() first.")
            return None

        os.makedirs(output_dir, exist_ok=True)
        fig, ax = plt.subplots(figsize=self.config.get('figure_size', (12, 8)))

        scatter = ax.scatter(
            self.lattice_scores['longitude'],
            self.lattice_scores['latitude'],
            c=self.lattice_scores['score'],
            cmap=self.config.get('color_palette', 'viridis'),
            s=4,
            vmin=0,
            vmax=100,
        )
        fig.colorbar(scatter, ax=ax, label='Composite score')

        layers = [
            (self.assets, 'black', 's', 'Hydrogen assets'),
            (self.renewables, 'green', '^', 'Renewable sources'),
            (self.demand_centers, 'red', 'o', 'Demand centers'),
        ]
        for features, color, marker, label in layers:
            if features:
                ax.scatter([f.longitude for f in features], [f.latitude for f in features],
                           c=color, marker=marker, s=60, edgecolors='white', label=label)

        if self.site_scores:
            ax.scatter([s.longitude for s in self.site_scores], [s.latitude for s in self.site_scores],
                       c='gold', marker='*', s=180, edgecolors='black', label='Top sites')
            for rank, site in enumerate(self.site_scores[:10], start=1):
                ax.annotate(str(rank), (site.longitude, site.latitude),
                            xytext=(4, 4), textcoords='offset points', fontsize=8)

        ax.set_xlabel('Longitude')
        ax.set_ylabel('Latitude')
        criteria = (self.optimization_results or {}).get('criteria', '')
        ax.set_title(f'H2 Site Scores ({criteria})')
        ax.legend(loc='lower left', fontsize=8)

        path = os.path.join(output_dir, 'site_score_map.png')
        fig.savefig(path, dpi=self.config.get('map_dpi', 150), bbox_inches='tight')
        plt.close(fig)
        self._log(f"  Visualization saved to: {path}")
        return path


def _lattice_point(lat, lon):
    return GeoPoint(float(lat), float(lon))


def find_optimal_sites(criteria, assets, renewables, demand_centers, number_of_sites=10,
                       bounds=None, step_degrees=DEFAULT_STEP_DEGREES, config=None):
    """
    Functional entry point: build a model over the given collections and
    return the top sites. Defaults to quiet output when no config is given.
    """
    if config is None:
        config = {**get_default_config(), 'verbose_logging': False}
    model = H2SiteOptimizationModel(assets, renewables, demand_centers, config=config)
    return model.find_optimal_sites(criteria, number_of_sites=number_of_sites,
                                    bounds=bounds, step_degrees=step_degrees)
