"""
setup.py - Package Installation Configuration
==============================================
"""

from setuptools import setup
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
if readme_file.exists():
    long_description = readme_file.read_text()
else:
    long_description = "Quadrant Balancing: Greedy vs Aggregate weighted point partitioning"

# Read requirements
requirements_file = Path(__file__).parent / "requirements.txt"
if requirements_file.exists():
    with open(requirements_file) as f:
        requirements = [line.strip() for line in f
                       if line.strip() and not line.startswith('#')]
else:
    requirements = [
        'numpy>=1.21.0',
        'matplotlib>=3.6.0',
        'pandas>=1.3.0',
        'jinja2>=3.0.0',
        'seaborn>=0.11.0'
    ]

setup(
    name='quadrant-balance',
    version='1.0.0',
    author='Quadrant Balancing Team',
    description='Balancing weighted point sets into four regions with two competing heuristics',
    long_description=long_description,
    long_description_content_type='text/markdown',
    py_modules=[
        'config',
        'experiments',
        'interactive',
        'main',
        'models',
        'partitioners',
        'reports',
        'sector_geometry',
        'task_io',
        'utils',
        'visualization',
    ],
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering :: Mathematics',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Operating System :: OS Independent',
    ],
    python_requires='>=3.8',
    install_requires=requirements,
    extras_require={
        'dev': [
            'pytest>=6.2.0',
            'black>=21.6b0',
            'flake8>=3.9.0',
            'mypy>=0.910',
            'coverage>=5.5',
        ],
        'test': [
            'pytest>=6.2.0',
        ],
        'yaml': [
            'PyYAML>=5.4',
        ],
    },
    entry_points={
        'console_scripts': [
            'quadrant-balance=main:main',
        ],
    },
    zip_safe=False,
)
