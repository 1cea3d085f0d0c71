# setup.py
from setuptools import find_namespace_packages, setup

setup(
    name="assetlib",
    version="1.0.0",
    description="Adaptive data access layer for a media asset organizer",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["assetlib*"]),
    python_requires=">=3.9",
    install_requires=[
        "requests",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'assetlib=assetlib.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
