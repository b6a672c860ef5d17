import json
from typing import List, Optional
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from app import db
from app.models import GameInstance
from app.services.errors import NotFoundError, ServiceError
from .nim import NimGame, WAITING_TO_START

GAME_TYPES = {
    NimGame.game_type: NimGame,
}


def _load(game_id: str):
    row = GameInstance.query.filter_by(game_id=game_id).first()
    if not row:
        raise NotFoundError('Game not found')
    game_cls = GAME_TYPES.get(row.game_type)
    if not game_cls:
        raise ServiceError(f'Unsupported game type: {row.game_type}')
    return row, game_cls(row.game_id, state=row.state_dict)


def _commit() -> None:
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.warning(f"[game-store] failed: {exc}")
        raise ServiceError(f'Database error: {exc}') from exc


def _store(row: GameInstance, game) -> None:
    row.state = json.dumps(game.state)
    row.players = json.dumps(game.players)
    row.status = game.status
    db.session.add(row)
    _commit()


def create_game(game_type: str) -> GameInstance:
    """Create an empty lobby for the given game type."""
    game_cls = GAME_TYPES.get(game_type)
    if not game_cls:
        raise ServiceError(f'Invalid game type: {game_type}')
    initial = game_cls.initial_state(int(current_app.config.get('NIM_INITIAL_OBJECTS', 21)))
    row = GameInstance(game_type=game_type, status=initial['status'], state=json.dumps(initial), players='[]')
    db.session.add(row)
    _commit()
    current_app.logger.info(f"[game-create] game={row.game_id} type={game_type}")
    return row


def get_game(game_id: str) -> GameInstance:
    row, _ = _load(game_id)
    return row


def join_game(game_id: str, player_id: str) -> GameInstance:
    row, game = _load(game_id)
    game.join(player_id)
    _store(row, game)
    current_app.logger.info(f"[game-join] game={game_id} player={player_id} status={game.status}")
    return row


def leave_game(game_id: str, player_id: str) -> dict:
    """Remove a player; a waiting game left empty is deleted.

    Returns the serialized game as it was after the player left.
    """
    row, game = _load(game_id)
    game.leave(player_id)
    _store(row, game)
    payload = row.to_dict()
    if game.status == WAITING_TO_START and not game.players:
        db.session.delete(row)
        _commit()
        current_app.logger.info(f"[game-remove] game={game_id} removed after last player left")
    else:
        current_app.logger.info(f"[game-leave] game={game_id} player={player_id} status={game.status}")
    return payload


def make_move(game_id: str, player_id: str, num_objects) -> GameInstance:
    row, game = _load(game_id)
    game.apply_move(player_id, num_objects)
    _store(row, game)
    current_app.logger.info(
        f"[game-move] game={game_id} player={player_id} objects={num_objects} "
        f"remaining={game.state.get('remainingObjects')} status={game.status}"
    )
    return row


def get_games(game_type: Optional[str] = None, status: Optional[str] = None) -> List[GameInstance]:
    query = GameInstance.query
    if game_type:
        query = query.filter_by(game_type=game_type)
    if status:
        query = query.filter_by(status=status)
    return query.order_by(GameInstance.id).all()
