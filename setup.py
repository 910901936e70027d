from setuptools import setup, find_packages

setup(
    name="reqfuzz",
    version="0.3.0",
    description="reqfuzz: concurrent templated HTTP request fuzzer",
    packages=find_packages(include=["reqfuzz", "reqfuzz.*"]),
    install_requires=[
        "requests",
        "urllib3",
        "pyyaml",
        "colorama",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "reqfuzz=reqfuzz.cli:main",
        ],
    },
    python_requires=">=3.9",
)
