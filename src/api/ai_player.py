"""
ウェブAPI用 AI実行モジュール
探索はワーカースレッドで行い、イベントループを止めない
"""

import asyncio
import logging
import threading
from typing import List, Optional

from fastapi.concurrency import run_in_threadpool

from ..ai.search import DamaAI
from ..engine.game import GameState
from ..engine.move import Move

logger = logging.getLogger(__name__)

# AIの1手番あたりの思考時間の上限（秒）
AI_TIMEOUT_SECONDS = 30.0


async def run_ai_turn(
    game: GameState,
    difficulty: str = 'medium',
    timeout: float = AI_TIMEOUT_SECONDS,
    seed: Optional[int] = None
) -> List[Move]:
    """
    AIの手番（連続取りを含む）を計算して対局に適用する

    探索は対局のコピー上で行い、時間切れなら停止イベントをセットして
    SearchCancelled を送出する。その場合は本物の対局には何も適用しない。
    """
    stop_event = threading.Event()
    ai = DamaAI(difficulty, seed=seed, stop_event=stop_event)
    planning_game = game.copy()

    loop = asyncio.get_running_loop()
    timer = loop.call_later(timeout, stop_event.set)
    try:
        planned = await run_in_threadpool(ai.play_turn, planning_game)
    finally:
        timer.cancel()

    for move in planned:
        game.play(move)

    logger.info(
        "AI (%s) played %d move(s): %s",
        difficulty, len(planned), ", ".join(str(move) for move in planned)
    )
    return planned
