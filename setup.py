from setuptools import setup, find_packages

setup(
    name="omeroclient",
    version="0.1.0",
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires=">=3.10",
    install_requires=[
        "attrs",
        "cattrs",
        "certifi",
        "httpx",
        "python-dotenv",
        "rich",
        "typer",
        "typing_extensions",
    ],
    extras_require={"test": ["pytest", "hypothesis"]},
    entry_points={"console_scripts": ["omeroclient=omeroclient.cli.main:app"]},
    description="A client for OMERO image servers that always provides OME-TIFF downloads",
)
