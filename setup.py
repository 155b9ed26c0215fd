from setuptools import find_namespace_packages, setup


def read_requirements():
    with open("requirements.txt") as f:
        return [line for line in f.read().splitlines() if line and not line.startswith("#")]


setup(
    name="applauncher",
    version="0.1.0",
    description="A searchable launcher for installed desktop applications",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
    ],
    python_requires=">=3.10",
    install_requires=read_requirements(),
    extras_require={
        "gui": [
            "PyGObject",
        ],
        "dev": [
            "pygobject-stubs",
        ],
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": ["applauncher=applauncher.main:main"],
    },
    packages=find_namespace_packages(include=["applauncher", "applauncher.*"]),
    include_package_data=True,
)
