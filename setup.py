from setuptools import find_packages, setup

setup(
    name="quil_assembly_emitter",
    version="0.1.0",
    description="Quil assembly emission for quantum instruction sequences.",
    packages=find_packages(include=["quilasm", "quilasm.*"]),
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.21",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
