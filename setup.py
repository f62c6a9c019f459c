from setuptools import find_packages, setup

setup(
    name="devflow",
    version="0.1.0",
    description="Interactive git and GitHub workflows with back navigation.",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    author="devflow contributors",
    packages=find_packages(include=["devflow", "devflow.*"]),
    python_requires=">=3.10",
    install_requires=[
        "prompt_toolkit>=3.0.48",
        "rich>=13.0",
        "pydantic>=2.0",
        "python-json-logger>=3.1",
        "pyyaml>=6.0",
        "toml>=0.10",
    ],
    extras_require={
        "test": ["pytest>=7.0", "pytest-asyncio>=0.21"],
    },
    entry_points={
        "console_scripts": ["devflow = devflow.__main__:main"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Environment :: Console",
        "Development Status :: 3 - Alpha",
    ],
)
