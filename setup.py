# setup.py
from setuptools import setup

setup(
    name="VoxelBlockCompressor",
    version="0.1.1",
    description="Greedy lossless decomposition of 3D tag grids into homogeneous blocks",
    packages=["volume", "compress", "engine"],
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.20",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
)
