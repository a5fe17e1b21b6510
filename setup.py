#!/usr/bin/env python3
"""
Setup script for the Gesture Feedback engine
"""

from setuptools import find_packages, setup

INSTALL_REQUIRES = [
    "numpy",
    "PyYAML",
    "fastapi",
    "pydantic>=2",
    "uvicorn",
    "python-dotenv",
]

EXTRAS_REQUIRE = {
    # MediaPipe landmark source and the OpenCV webcam loop
    "camera": [
        "opencv-python",
        "mediapipe",
    ],
    "test": [
        "pytest",
        "httpx",
    ],
}

setup(
    name="gesture-feedback",
    version="0.1.0",
    description="Hand gesture and facial expression classification from landmark streams",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"gesture_core": ["config.default.yaml"]},
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=INSTALL_REQUIRES,
    extras_require=EXTRAS_REQUIRE,
    entry_points={
        "console_scripts": [
            "gesture-feedback=gesture_core.main:run",
            "gesture-feedback-server=gesture_core.server:main",
        ],
    },
)
