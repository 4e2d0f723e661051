"""
Setup script for H2 Site Optimization Model
For backwards compatibility with older pip versions
"""

import os
from setuptools import setup

here = os.path.dirname(os.path.abspath(__file__))

# Read requirements
with open(os.path.join(here, 'requirements.txt')) as f:
    requirements = [line.strip() for line in f if line.strip() and not line.startswith('#')]

# Read README
with open(os.path.join(here, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

setup(
    name='h2-site-optimizer',
    version='1.0.0',
    description='Grid-search site scoring for hydrogen infrastructure placement',
    long_description=long_description,
    long_description_content_type='text/markdown',
    py_modules=[
        'h2_site_config',
        'h2_site_data',
        'h2_site_entities',
        'h2_site_model',
        'run_site_optimizer',
        'site_geometry',
        'site_recommendations',
        'site_scoring',
    ],
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Science/Research',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
    ],
    python_requires='>=3.9',
    install_requires=requirements,
    extras_require={
        'test': ['pytest>=7.0'],
    },
    entry_points={
        'console_scripts': [
            'h2-site-optimizer=run_site_optimizer:main',
        ],
    },
)
