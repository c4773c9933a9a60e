"""
ダマプロジェクトのセットアップスクリプト
"""

from setuptools import setup, find_namespace_packages

setup(
    name="dama",
    version="1.0.0",
    description="ダマ - チェッカー変種のルールエンジンと探索AI",
    author="",
    packages=find_namespace_packages(include=["src", "src.*"]),
    package_dir={"": "."},
    python_requires=">=3.10",
    install_requires=[
        "fastapi>=0.118.0",
        "uvicorn>=0.37.0",
        "pydantic>=2.11.10",
        "numpy>=1.24.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "hypothesis>=6.0.0",
            "httpx>=0.27.0",
        ],
    },
)
