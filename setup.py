from setuptools import setup, find_packages

setup(
    name="cql-sessions",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "cassandra-driver>=3.29.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "prometheus-client>=0.15.0",
        "tenacity>=8.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    python_requires=">=3.8",
    description="Keyspace session registry and prepared statement cache for Cassandra",
    author="PlatformQ Team",
)
