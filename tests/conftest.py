"""
pytest共通設定とフィクスチャ
"""

import pytest
import sys
from pathlib import Path

# プロジェクトルートをパスに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture
def empty_board():
    """空の盤面を提供するフィクスチャ"""
    from src.engine import Board
    return Board()


@pytest.fixture
def initial_board():
    """標準初期配置（赤が下）の盤面を提供するフィクスチャ"""
    from src.engine.initial_setup import load_initial_board
    return load_initial_board()


@pytest.fixture
def red_bottom():
    """赤を下にした盤の向き"""
    from src.engine import Orientation
    return Orientation.RED_BOTTOM


@pytest.fixture
def blue_bottom():
    """青を下にした盤の向き"""
    from src.engine import Orientation
    return Orientation.BLUE_BOTTOM


@pytest.fixture
def red_player():
    """赤プレイヤーを提供するフィクスチャ"""
    from src.engine import Player
    return Player.RED


@pytest.fixture
def blue_player():
    """青プレイヤーを提供するフィクスチャ"""
    from src.engine import Player
    return Player.BLUE
