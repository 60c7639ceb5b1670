from setuptools import setup, find_packages

setup(
    name="cryptor",
    version="0.1.0",
    description="Authenticated-encryption envelopes keyed by an application secret",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    python_requires=">=3.8",
    install_requires=[
        "cryptography",
        "python-dotenv",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
)
