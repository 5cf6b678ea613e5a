# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="rdebug",
    version="1.0.0",
    description="Leveled logging core with subscriber broadcast, console and rotating file sinks",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["rdebug", "rdebug.*"]),
    python_requires=">=3.8",
    install_requires=[],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'rdebug-demo=rdebug.main:main',  # Demo runner emitting sample messages
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
        "Topic :: System :: Logging",
    ],
)
