#!/usr/bin/env python

from setuptools import setup

setup(
    name="elastic-utils",
    version="0.1.0",
    description="Utilities for connecting to Elasticsearch, defining mappings and storing versioned documents",
    packages=["elastic_utils"],
    include_package_data=True,
    zip_safe=False,
    keywords=["elasticsearch", "mapping", "index"],
    classifiers=[
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Topic :: Database",
    ],
    python_requires=">=3.10",
    install_requires=[
        "elasticsearch~=8.13",
        "elastic-transport~=8.13",
        "python-dotenv",
        "pydantic>=2",
        "pydantic-settings",
    ],
    extras_require={
        'dev': [
            'pytest',
            'mypy',
            'flake8',
        ]
    },
)
