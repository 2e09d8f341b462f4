from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

requirements = [
    "click>=8.1.0",
    "tabulate>=0.9.0",
    "pyyaml>=6.0",
    "rich>=13.5.0",
    "numpy>=1.24.0",
    "aiohttp>=3.8.0",
    "pydantic>=2.0",
]

setup(
    name="lambda-memory-bench",
    version="1.0.0",
    author="Lambda Memory Bench Contributors",
    author_email="",
    description="Cold/warm start benchmark and memory tier recommender for serverless functions",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Testing",
        "Topic :: System :: Benchmark",
    ],
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "lambda-memory-bench=lambda_memory_bench.cli:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
