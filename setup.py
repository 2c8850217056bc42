"""Setup script for the faculty schedule builder."""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="faculty-schedule-builder",
    version="0.1.0",
    author="Faculty Schedule Builder",
    description="Record weekly faculty hours, compute totals and export to PDF or Excel",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "facsched": ["templates/*.html"],
    },
    python_requires=">=3.8",
    install_requires=[
        "flask>=2.2.0",
        "werkzeug>=2.2.0",
        "dateparser>=1.2.0",
        "openpyxl>=3.1.0",
        "reportlab>=4.0.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pdfplumber>=0.10.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "facsched=facsched.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Education",
        "Topic :: Education",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
