from setuptools import setup, find_packages

setup(
    name="uiauto-objrepo",
    version="1.0.0",
    packages=find_packages(include=["uiauto_objrepo", "uiauto_objrepo.*"]),
    install_requires=[
        "pyyaml>=5.4",
        "jsonschema>=4.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.8",
    package_data={
        "uiauto_objrepo": ["schemas/*.json"],
    },
    entry_points={
        "console_scripts": [
            "uiauto-objrepo=uiauto_objrepo.cli:main",
        ],
    },
)
