from setuptools import setup, find_packages

setup(
    name="screen-locator",
    version="1.0.0",
    description="Locate reference images in screenshots and derive regions of interest",
    author="NovaVista",
    packages=find_packages(include=["locator", "locator.*"]),
    install_requires=[
        "opencv-python>=4.8.0,<5",
        "numpy>=1.24.0",
        "scipy>=1.10.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "desktop": ["pyautogui>=0.9.54"],
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.9",
)
