# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="modforge",
    version="0.1.0",
    description="Asynchronous build pipeline for modular client-side applications",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["modforge", "modforge.*"]),
    python_requires=">=3.8",
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'modforge=modforge.main:main',  # Build a project from the command line
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
