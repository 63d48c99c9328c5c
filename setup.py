from setuptools import setup, find_packages

with open("requirements.txt") as f:
    required = [line for line in f.read().splitlines() if line.strip()]

setup(
    name="appcache",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=required,
    extras_require={"test": ["pytest"]},
    python_requires=">=3.10",
    entry_points={"console_scripts": ["appcache = appcache.cli:main"]},
    description="HTML5 AppCache manifest generator",
)
