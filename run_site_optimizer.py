#!/usr/bin/env python3
"""
Easy-to-use H2 Site Optimization Model Runner
"""

import os
import sys
import argparse
from datetime import datetime

from h2_site_config import get_default_config, get_scenario_configs, print_config_summary
from h2_site_entities import OptimizationCriteria, SiteOptimizationError


def get_next_version_dir(base_dir="h2_site_results"):
    """
    Get the next version number for output directory.
    Returns a directory name like 'h2_site_results_v1', 'h2_site_results_v2', etc.
    """
    version = 1
    while os.path.exists(f"{base_dir}_v{version}"):
        version += 1
    return f"{base_dir}_v{version}"


def build_parser():
    parser = argparse.ArgumentParser(description='Run H2 Site Optimization Model')

    # Basic parameters
    parser.add_argument('--criteria', choices=[c.value for c in OptimizationCriteria],
                        default=OptimizationCriteria.RENEWABLE_PROXIMITY.value,
                        help='Optimization criteria selecting the factor weights')
    parser.add_argument('--scenario', choices=['default', 'fine_grid', 'coarse_grid',
                                               'western_corridor', 'eastern_corridor'],
                        default='default', help='Configuration scenario to use')
    parser.add_argument('--n_sites', type=int, default=None,
                        help='Number of sites to return')
    parser.add_argument('--step', type=float, default=None,
                        help='Lattice spacing in degrees (overrides scenario)')
    parser.add_argument('--investment_range', default=None,
                        help='Investment range label, e.g. "₹50L - ₹100L"')
    parser.add_argument('--source', choices=['curated', 'grid'], default=None,
                        help='Recommendation source')

    # File paths
    parser.add_argument('--assets', default=None,
                        help='Hydrogen assets file (CSV/GeoJSON); seed data if omitted')
    parser.add_argument('--renewables', default=None,
                        help='Renewable sources file (CSV/GeoJSON); seed data if omitted')
    parser.add_argument('--demand_centers', default=None,
                        help='Demand centers file (CSV/GeoJSON); seed data if omitted')

    # Output options
    parser.add_argument('--skip_visualizations', action='store_true',
                        help='Skip the score map for a faster run')
    parser.add_argument('--output_dir', default=None,
                        help='Custom output directory (auto-generated if not specified)')
    parser.add_argument('--quiet', action='store_true',
                        help='Suppress progress output from the model')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    print("="*60)
    print("H2 SITE OPTIMIZATION MODEL - GRID SEARCH ANALYSIS")
    print("="*60)
    print(f"Criteria: {args.criteria}")
    print(f"Scenario: {args.scenario}")
    print(f"Started: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print()

    missing_files = [f for f in (args.assets, args.renewables, args.demand_centers)
                     if f and not os.path.exists(f)]
    if missing_files:
        print("❌ ERROR: Reference files not found:")
        for f in missing_files:
            print(f"   - {f}")
        return 1

    # Import after file check
    from h2_site_data import load_reference_data
    from h2_site_model import H2SiteOptimizationModel
    from site_recommendations import generate_recommendations

    if args.scenario == 'default':
        config = get_default_config()
    else:
        config = get_scenario_configs()[args.scenario]
        print(f"✓ Using {args.scenario} scenario configuration")

    # Override specific parameters from command line
    if args.step is not None:
        config['grid_step_degrees'] = args.step
    if args.n_sites is not None:
        config['default_number_of_sites'] = args.n_sites
    if args.source is not None:
        config['recommendation_source'] = args.source
    if args.quiet:
        config['verbose_logging'] = False
    investment_range = args.investment_range or config['default_investment_range']

    print_config_summary(config)
    print()

    try:
        print("Loading reference data...")
        data = load_reference_data(args.assets, args.renewables, args.demand_centers)

        model = H2SiteOptimizationModel(
            data['assets'], data['renewables'], data['demand_centers'], config=config)
        sites = model.find_optimal_sites(args.criteria)

        recommendations = generate_recommendations(
            args.criteria, investment_range,
            number_of_sites=config['default_number_of_sites'],
            source=config['recommendation_source'],
            model=model,
            site_scores=sites,
        )
    except (SiteOptimizationError, ValueError) as e:
        print(f"\n❌ ERROR: {e}")
        return 1

    print("\nTop sites:")
    for rank, site in enumerate(sites, start=1):
        print(f"  {rank:>2}. ({site.latitude:.2f}, {site.longitude:.2f})  score {site.composite_score}")

    print(f"\nRecommendations ({investment_range}): {len(recommendations)}")
    for rec in recommendations:
        print(f"  - {rec['name']}: score {rec['score']}")

    output_dir = args.output_dir or get_next_version_dir()
    model.export_results(output_dir, recommendations=recommendations)
    if not args.skip_visualizations and config.get('generate_visualizations', True):
        model.create_visualizations(output_dir)

    print("\n" + "="*60)
    print("✅ ANALYSIS COMPLETED SUCCESSFULLY!")
    print("="*60)
    print(f"Results have been saved to {output_dir}/")
    return 0


if __name__ == "__main__":
    sys.exit(main())
