from setuptools import find_packages, setup

with open("requirements.txt", "r", encoding="UTF-8") as f:
    required = f.read().splitlines()

setup(
    name="abikit",
    version="0.1",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=required,
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["abikit=abikit.cli:cli"]},
)
