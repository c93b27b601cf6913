# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Setup configuration for the AgentFlow trigger-dispatch and workflow-execution engine
"""

from setuptools import setup, find_packages

setup(
    name="agentflow",
    version="1.0.0",
    description="Trigger dispatch, workflow validation and execution engine for automation agents",
    author="Jason Cafarelli",
    package_dir={"": "backend"},
    packages=find_packages(where="backend", exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0",
        "PyYAML>=6.0",
        "croniter>=1.3.0",
        "fastapi>=0.100.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "httpx>=0.24.0",
        ]
    },
)
