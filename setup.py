# setup.py
from setuptools import setup, find_packages

setup(
    name="favicon_stats",
    version="0.1.0",
    description="Обработка результатов обхода favicon: нормализация, дедупликация и статистика",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"favicon_stats.report": ["templates/*.j2"]},
    include_package_data=True,
    install_requires=[
        "click>=8.1",
        "pydantic>=2.0",
        "PyYAML>=6.0",
        "Jinja2>=3.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "hypothesis>=6.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "favicon-stats=favicon_stats.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
