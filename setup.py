"""
Setup script for fieldtrace package.
"""

from setuptools import setup, find_packages
import os

# Read README file
def read_readme():
    readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
    if os.path.exists(readme_path):
        with open(readme_path, 'r', encoding='utf-8') as f:
            return f.read()
    return ""

# Read requirements
def read_requirements():
    req_path = os.path.join(os.path.dirname(__file__), 'requirements.txt')
    if os.path.exists(req_path):
        with open(req_path, 'r') as f:
            return [line.strip() for line in f if line.strip() and not line.startswith('#')]
    return []

setup(
    name="fieldtrace",
    version="0.1.0",
    author="fieldtrace Development Team",
    description="Lattice advection through analytic vector fields with trajectory recording",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    packages=find_packages(include=["fieldtrace", "fieldtrace.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Scientific/Engineering :: Physics",
    ],
    python_requires=">=3.8",
    install_requires=read_requirements(),
    extras_require={
        "jax": ["jax"],
        "gpu": ["jax[cuda]"],
        "dev": ["pytest", "black", "flake8"],
        "all": ["jax", "pytest", "black", "flake8"],
    },
    entry_points={
        "console_scripts": [
            "fieldtrace=fieldtrace.__main__:main",
        ],
    },
    keywords="vector field, lattice, particle advection, euler integration, jax",
    include_package_data=True,
)
