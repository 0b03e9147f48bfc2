from setuptools import setup, find_packages
import os

# Function to read the requirements.txt file
def parse_requirements(filename="requirements.txt"):
    """Load requirements from a pip requirements file."""
    try:
        with open(os.path.join(os.path.dirname(__file__), filename), 'r') as f:
            return [line.strip() for line in f if line.strip() and not line.startswith('#')]
    except IOError:
        # Fall back to the core runtime stack if requirements.txt is missing
        # (e.g. when building from an sdist that did not ship it).
        return [
            "numpy>=1.20",
            "pandas>=1.3",
            "PyYAML>=5.4",
        ]

# Read long description from README.md if it exists
try:
    with open(os.path.join(os.path.dirname(__file__), 'README.md'), encoding='utf-8') as f:
        long_description = f.read()
except FileNotFoundError:
    long_description = 'Educational diabetes digital twin: heuristic glucose forecasts, food safety checks and insulin dose estimates.'

setup(
    name="diabetic-twin",
    version="1.0.0",
    author="DiabeticTwin Team",
    description="Educational glucose forecasting, food safety and medication guidance engines",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",
    packages=find_packages(where=".", include=['DiabeticTwin', 'DiabeticTwin.*']),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Education",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Scientific/Engineering :: Medical Science Apps.",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    python_requires=">=3.8",
    install_requires=parse_requirements(),
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=22.0.0",
            "flake8>=5.0.0",
            "mypy>=1.0.0",
        ],
    },
    include_package_data=True,
    entry_points={
        'console_scripts': [
            'diabetic-twin-report=DiabeticTwin.demo.assessment_report:main',
        ],
    },
    keywords=[
        "diabetes",
        "glucose prediction",
        "insulin dosing",
        "glycemic index",
        "digital twin",
        "healthcare education",
    ],
)
