# -*- coding: utf-8 -*-
from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="topodelay",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy>=1.20.0",
        "pandas>=1.3.0",
        "networkx>=2.6.0",
        "matplotlib>=3.4.0"
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",     # 单元测试
            "pytest-cov>=3.0.0",  # 测试覆盖率
            "black>=22.0.0",      # 代码格式化
            "pylint>=2.14.0"      # 代码质量检查
        ]
    },
    entry_points={
        "console_scripts": [
            "topodelay=topodelay.__main__:main",
        ]
    },
    python_requires=">=3.8",
    description="离散事件仿真的网络拓扑延迟引擎",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Topic :: System :: Networking",
    ],
)
