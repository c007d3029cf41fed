"""Setup configuration for remoteit-api package"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="remoteit-api",
    version="0.12.2",
    author="Feriixu",
    description="A wrapper around the remote.it GraphQL API, also implementing the custom request signing.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/Feriixu/remoteit-api-wrapper-rs",
    packages=find_packages(include=["remoteit", "remoteit.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "License :: OSI Approved :: MIT License",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
    install_requires=[
        "aiohttp>=3.9.0",
        "yarl>=1.9.0",
        "requests>=2.31.0",
        "urllib3>=2.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "mypy>=1.0.0",
            "pylint>=2.17.0",
        ],
    },
    keywords="remoteit remote.it api wrapper graphql client hmac signing",
)
