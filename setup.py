from pathlib import Path

from setuptools import find_packages, setup

setup(
    name="blocklearn",
    version=Path("./blocklearn/VERSION").read_text().strip(),
    description="Mini-batch gradient descent with momentum and a rolling error estimate",
    packages=find_packages(include=["blocklearn", "blocklearn.*"]),
    package_data={"blocklearn": ["VERSION"]},
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "torch",
        "tqdm",
        "easydict",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["blocklearn=blocklearn.cli:main"],
    },
)
