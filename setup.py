from setuptools import setup, find_packages

setup(
    name="BrokerIntegrator",
    version="0.1.0",
    description="Async server-side client for the SoNoBrokers REST backend, with bearer-token injection and retries",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=find_packages(include=['BrokerIntegrator', 'BrokerIntegrator.*']),
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.10',
    install_requires=[
        "httpx",
        "pydantic>=2",
        "tenacity",
        "structlog",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
)
