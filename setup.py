from setuptools import find_packages, setup

setup(
    name="pptx-slim-swapper",
    version="0.1.0",
    description="把 PPTX 內的大型媒體換成佔位圖以縮小檔案，並可依 manifest 還原",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.10",
    install_requires=["Pillow>=9.2"],
    extras_require={"test": ["pytest>=7"]},
    entry_points={
        "console_scripts": ["pptx-slim-swapper=pptx_slim_swapper.main:main"],
    },
)
