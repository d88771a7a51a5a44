from setuptools import setup, find_packages

setup(
    name="canvas-submission-sync",
    version="0.1.0",
    description="Mirror Canvas assignment submissions to a local directory",
    packages=find_packages(include=["canvas_submissions*"]),
    python_requires=">=3.8",
    install_requires=[
        "canvasapi>=3.0.0",
        "requests>=2.27.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "canvas-submission-sync=canvas_submissions.cli:main",
        ],
    },
)
