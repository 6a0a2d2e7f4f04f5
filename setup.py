from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="cc-taxii2-client",
    version="0.1.5",
    author="plasticuproject",
    description="Minimal CloudCover TAXII 2.1 client library and CLI",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/plasticuproject/cc-taxii2-client",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"cc_taxii2": ["conf/*.yaml"]},
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Security",
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "cc-taxii2=cc_taxii2.cli:main",
        ],
    },
)
