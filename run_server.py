#!/usr/bin/env python
"""
ダマ 開発サーバ起動スクリプト
"""

import logging
import sys
import os

# プロジェクトルートをパスに追加
project_root = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, project_root)

from src.api.main import app
import uvicorn

if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    print("=" * 60)
    print("ダマ (Dama) 開発サーバを起動します")
    print("=" * 60)
    print("APIサーバ: http://localhost:8001")
    print("API ドキュメント: http://localhost:8001/docs")
    print("=" * 60)
    print()

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8001,
        reload=False,
        log_level="info"
    )
