from setuptools import setup, find_packages

setup(
    name="unitary-sim",
    version="0.1.0",
    description="Exact unitary simulation of small quantum circuits in the U/CX basis",
    author="Sreyas Prabu",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.21",
        "qiskit>=1.0",
    ],
    extras_require={
        "dev": ["pytest>=7.0", "scipy>=1.7"],
    },
)
