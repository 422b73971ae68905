from setuptools import setup, find_packages

setup(
    name="tictactoe7",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "gymnasium",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "tictactoe7=tictactoe7.interfaces.cli:main",
        ],
    },
)
