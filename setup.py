#!/usr/bin/env python3
"""
Setup script for mikrotik_exporter.
Installs the exporter package and the ``mikrotik-exporter`` console script.
"""

from setuptools import setup, find_packages

setup(
    name="mikrotik-exporter",
    version="1.0.0",
    description="Prometheus exporter for MikroTik RouterOS devices",
    python_requires=">=3.10",
    packages=find_packages(include=["mikrotik_exporter", "mikrotik_exporter.*"]),
    install_requires=[
        "fastapi>=0.100",
        "uvicorn>=0.23",
        "pydantic>=2.0",
        "PyYAML>=6.0",
        "prometheus-client>=0.17",
        "librouteros>=3.2",
        "dnspython>=2.3",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
            "httpx>=0.24",
        ],
    },
    entry_points={
        "console_scripts": [
            "mikrotik-exporter=mikrotik_exporter.__main__:main",
        ],
    },
)
