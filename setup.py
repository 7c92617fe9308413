from pathlib import Path

from setuptools import find_packages, setup

ROOT = Path(__file__).parent
README = (ROOT / "README.md").read_text(encoding="utf-8") if (ROOT / "README.md").exists() else ""

setup(
    name="imgtensor",
    version="0.1.0",
    description="Convert a batch of images into a single packed NCHW float tensor for ML pipelines",
    long_description=README,
    long_description_content_type="text/markdown",
    author="imgtensor Contributors",
    packages=find_packages(exclude=("tests", "tests.*")),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.19",
        "opencv-python>=4.5.0",
    ],
    extras_require={
        "torch": [
            "torch>=1.9.0",
        ],
        "yaml": [
            "PyYAML>=5.4",
        ],
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "Pillow>=8.0.0",
            "PyYAML>=5.4",
            "black>=23.0.0",
            "isort>=5.12.0",
            "flake8>=6.0.0",
            "mypy>=1.0.0",
        ],
        "all": [
            "imgtensor[torch,yaml,dev]",
        ],
    },
    include_package_data=True,
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
        "Topic :: Scientific/Engineering :: Image Recognition",
    ],
    keywords=[
        "computer-vision",
        "machine-learning",
        "image-processing",
        "preprocessing",
        "tensor",
    ],
    entry_points={
        "console_scripts": [
            "imgtensor-convert=imgtensor.cli:main",
        ],
    },
)
