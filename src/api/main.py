"""
ダマ FastAPI サーバ
対局の状態管理とAIの手番実行のエンドポイントを提供

クライアントから届いた手 {from, to, captures} はそのまま信用せず、
サーバ側の盤面で生成した合法手と照合してから適用する。
"""

import asyncio
import logging
import uuid
from typing import Dict, List, Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from ..engine import (
    Board,
    DesynchronizedMoveError,
    GameOverError,
    GameState,
    IllegalMoveError,
    InvalidSnapshotError,
    Orientation,
    Player,
    SearchCancelled,
)
from .ai_player import AI_TIMEOUT_SECONDS, run_ai_turn

logger = logging.getLogger(__name__)


class GameSession:
    """1局分のセッション（対局状態と対局設定）"""

    def __init__(
        self,
        game_id: str,
        game: GameState,
        mode: str,
        human_color: Player,
        difficulty: str
    ):
        self.game_id = game_id
        self.game = game
        self.mode = mode
        self.human_color = human_color
        self.difficulty = difficulty
        # 同じ対局への操作を直列化する（AIの連続取りが終わるまで他の手を受けない）
        self.lock = asyncio.Lock()

    @property
    def ai_color(self) -> Optional[Player]:
        return self.human_color.opponent if self.mode == 'ai' else None

    def to_dict(self) -> dict:
        data = self.game.to_dict()
        data.update({
            "game_id": self.game_id,
            "mode": self.mode,
            "human_color": self.human_color.value,
            "difficulty": self.difficulty,
        })
        return data


class GameRegistry:
    """進行中の対局を保持する"""

    def __init__(self):
        self._sessions: Dict[str, GameSession] = {}

    def add(self, session: GameSession):
        self._sessions[session.game_id] = session

    def get(self, game_id: str) -> GameSession:
        if game_id not in self._sessions:
            raise HTTPException(status_code=404, detail="Game not found")
        return self._sessions[game_id]

    def remove(self, game_id: str):
        self.get(game_id)
        del self._sessions[game_id]

    def __len__(self):
        return len(self._sessions)


# Pydanticモデル（リクエスト/レスポンス用）

class NewGameRequest(BaseModel):
    mode: Literal['ai', 'local'] = 'ai'
    human_color: Literal['red', 'blue'] = 'red'
    difficulty: Literal['easy', 'medium', 'hard'] = 'medium'
    board: Optional[List[List[Optional[str]]]] = None  # 盤面スナップショット（省略時は初期配置）
    current_player: Optional[Literal['red', 'blue']] = None


class NewGameResponse(BaseModel):
    game_id: str
    message: str
    game_state: dict


class MoveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_pos: List[int] = Field(alias='from', min_length=2, max_length=2)
    to_pos: List[int] = Field(alias='to', min_length=2, max_length=2)
    captures: Optional[List[List[int]]] = None


class MoveResponse(BaseModel):
    success: bool
    message: str
    game_state: dict
    legal_moves: Optional[List[dict]] = None


class AIMoveRequest(BaseModel):
    difficulty: Optional[Literal['easy', 'medium', 'hard']] = None


class AIMoveResponse(BaseModel):
    moves: List[dict]
    game_state: dict


def _legal_moves_payload(game: GameState) -> Optional[List[dict]]:
    if game.game_over:
        return None
    return [move.to_dict() for move in game.legal_moves]


def create_app() -> FastAPI:
    app = FastAPI(
        title="Dama API",
        description="ダマ（チェッカー変種）のバックエンドAPI",
        version="1.0.0"
    )

    # CORS設定（フロントエンドからのアクセスを許可）
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.registry = GameRegistry()

    @app.get("/api")
    async def root():
        """APIルート"""
        return {
            "message": "Dama API",
            "version": "1.0.0",
            "endpoints": [
                "/new_game",
                "/get_game/{game_id}",
                "/get_legal_moves/{game_id}",
                "/apply_move/{game_id}",
                "/ai_move/{game_id}",
                "/undo/{game_id}",
                "/resign/{game_id}",
                "/delete_game/{game_id}",
            ]
        }

    @app.post("/new_game", response_model=NewGameResponse)
    async def new_game(request: Optional[NewGameRequest] = None):
        """
        新しいゲームを開始する
        盤面スナップショットを渡すとその局面から始める
        """
        request = request or NewGameRequest()
        human_color = Player(request.human_color)
        # 人間側を下にする（ローカル対戦は赤が下）
        orientation = (
            Orientation.with_bottom(human_color) if request.mode == 'ai'
            else Orientation.RED_BOTTOM
        )

        board = None
        if request.board is not None:
            try:
                board = Board.from_snapshot(request.board)
            except InvalidSnapshotError as e:
                raise HTTPException(status_code=400, detail=str(e))

        current_player = Player(request.current_player) if request.current_player else Player.RED
        game = GameState(board=board, current_player=current_player, orientation=orientation)

        game_id = str(uuid.uuid4())
        session = GameSession(game_id, game, request.mode, human_color, request.difficulty)
        app.state.registry.add(session)
        logger.info("New %s game %s (human=%s)", request.mode, game_id, human_color.value)

        return NewGameResponse(
            game_id=game_id,
            message="New game started",
            game_state=session.to_dict()
        )

    @app.get("/get_game/{game_id}")
    async def get_game(game_id: str):
        """ゲームの状態を取得"""
        return app.state.registry.get(game_id).to_dict()

    @app.get("/get_legal_moves/{game_id}")
    async def get_legal_moves(game_id: str):
        """現在のプレイヤーの合法手を取得"""
        session = app.state.registry.get(game_id)
        game = session.game

        if game.game_over:
            return {"legal_moves": [], "message": "Game is over"}

        return {
            "legal_moves": [move.to_dict() for move in game.legal_moves],
            "count": len(game.legal_moves),
            "current_player": game.current_player.value,
            "phase": game.phase.name,
        }

    @app.post("/apply_move/{game_id}", response_model=MoveResponse)
    async def apply_move(game_id: str, move_request: MoveRequest):
        """手を適用する（サーバ側の合法手と照合する）"""
        session = app.state.registry.get(game_id)

        async with session.lock:
            game = session.game
            if game.game_over:
                raise HTTPException(status_code=400, detail="Game is already over")
            if session.mode == 'ai' and game.current_player == session.ai_color:
                raise HTTPException(status_code=400, detail="It is the AI's turn")

            try:
                move = game.resolve_move(
                    move_request.from_pos, move_request.to_pos, move_request.captures
                )
                result = game.play(move)
            except IllegalMoveError as e:
                logger.warning("Game %s: rejected move %s: %s", game_id, move_request, e)
                return MoveResponse(
                    success=False,
                    message=str(e),
                    game_state=session.to_dict(),
                    legal_moves=_legal_moves_payload(game)
                )
            except DesynchronizedMoveError as e:
                logger.warning("Game %s: desynchronized move: %s", game_id, e)
                raise HTTPException(status_code=409, detail=str(e))
            except GameOverError as e:
                raise HTTPException(status_code=400, detail=str(e))

            message = "Move applied"
            if result is not None:
                message = "Game over"

            return MoveResponse(
                success=True,
                message=message,
                game_state=session.to_dict(),
                legal_moves=_legal_moves_payload(game)
            )

    @app.post("/ai_move/{game_id}", response_model=AIMoveResponse)
    async def ai_move(game_id: str, request: Optional[AIMoveRequest] = None):
        """
        AIの手番を実行する（連続取りは最後まで指す）
        difficulty を省略するとゲーム作成時の難易度を使う
        """
        session = app.state.registry.get(game_id)
        difficulty = (request.difficulty if request else None) or session.difficulty

        async with session.lock:
            game = session.game
            if game.game_over:
                raise HTTPException(status_code=400, detail="Game is already over")
            if session.mode == 'ai' and game.current_player != session.ai_color:
                raise HTTPException(status_code=400, detail="It is not the AI's turn")

            try:
                moves = await run_ai_turn(game, difficulty, timeout=AI_TIMEOUT_SECONDS)
            except SearchCancelled:
                raise HTTPException(status_code=503, detail="AI search timed out")

            return AIMoveResponse(
                moves=[move.to_dict() for move in moves],
                game_state=session.to_dict()
            )

    @app.post("/undo/{game_id}")
    async def undo(game_id: str):
        """1手戻す（AI対戦ではAIの手番分もまとめて戻す）"""
        session = app.state.registry.get(game_id)

        async with session.lock:
            game = session.game
            if not game.undo():
                raise HTTPException(status_code=400, detail="Nothing to undo")
            while session.mode == 'ai' and game.current_player == session.ai_color and game.undo():
                pass
            return {"message": "Undone", "game_state": session.to_dict()}

    @app.post("/resign/{game_id}")
    async def resign(game_id: str):
        """
        投了する
        現在のプレイヤーが投了し、相手の勝利となる
        """
        session = app.state.registry.get(game_id)

        async with session.lock:
            game = session.game
            if game.game_over:
                raise HTTPException(status_code=400, detail="Game is already over")
            loser = game.current_player
            result = game.resign(loser)
            return {
                "message": f"{loser.value} resigned",
                "winner": result.winner.value,
                "game_state": session.to_dict()
            }

    @app.delete("/delete_game/{game_id}")
    async def delete_game(game_id: str):
        """ゲームを削除"""
        app.state.registry.remove(game_id)
        return {"message": "Game deleted"}

    return app


app = create_app()
