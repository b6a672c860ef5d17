from typing import Any, Dict, List, Optional
from app.services.errors import GameError, InvalidMoveError

WAITING_TO_START = 'WAITING_TO_START'
IN_PROGRESS = 'IN_PROGRESS'
OVER = 'OVER'

MIN_OBJECTS_PER_MOVE = 1
MAX_OBJECTS_PER_MOVE = 3


class NimGame:
    """Rules for a two-player game of Nim.

    Players alternate removing 1-3 objects from a single pile; player1 moves
    first. Whoever removes the last object loses. The game works on a plain
    state dict so it can be stored as JSON and rebuilt per request.
    """

    game_type = 'Nim'

    def __init__(self, game_id: str, state: Optional[Dict[str, Any]] = None, initial_objects: int = 21):
        self.game_id = game_id
        self.state = state or self.initial_state(initial_objects)

    @staticmethod
    def initial_state(initial_objects: int = 21) -> Dict[str, Any]:
        return {
            'status': WAITING_TO_START,
            'player1': None,
            'player2': None,
            'moves': [],
            'remainingObjects': initial_objects,
            'winners': None,
        }

    @property
    def status(self) -> str:
        return self.state['status']

    @property
    def players(self) -> List[str]:
        return [p for p in (self.state.get('player1'), self.state.get('player2')) if p]

    def player_to_move(self) -> Optional[str]:
        key = 'player1' if len(self.state['moves']) % 2 == 0 else 'player2'
        return self.state.get(key)

    def _other_player(self, player_id: str) -> Optional[str]:
        if self.state.get('player1') == player_id:
            return self.state.get('player2')
        return self.state.get('player1')

    def join(self, player_id: str) -> None:
        if player_id in self.players:
            raise GameError('Cannot join game: player already in game')
        if self.status != WAITING_TO_START:
            raise GameError('Cannot join game: game is not waiting for players')
        if len(self.players) >= 2:
            raise GameError('Cannot join game: game is full')
        if not self.state.get('player1'):
            self.state['player1'] = player_id
        else:
            self.state['player2'] = player_id
        if len(self.players) == 2:
            self.state['status'] = IN_PROGRESS

    def leave(self, player_id: str) -> None:
        if player_id not in self.players:
            raise GameError('Cannot leave game: player is not in the game')
        if self.status == IN_PROGRESS:
            # Forfeit: whoever stays wins
            self.state['status'] = OVER
            self.state['winners'] = [self._other_player(player_id)]
            return
        if self.status == WAITING_TO_START:
            if self.state.get('player1') == player_id:
                self.state['player1'] = self.state.get('player2')
            self.state['player2'] = None

    def validate_move(self, player_id: str, num_objects: Any) -> int:
        if self.status != IN_PROGRESS:
            raise InvalidMoveError('Invalid move: game is not in progress')
        if player_id != self.player_to_move():
            raise InvalidMoveError('Invalid move: it is not your turn')
        # bool is an int subclass; reject it along with floats and strings
        if isinstance(num_objects, bool) or not isinstance(num_objects, int):
            raise InvalidMoveError('Invalid move: number of objects must be a whole number')
        if num_objects < MIN_OBJECTS_PER_MOVE or num_objects > MAX_OBJECTS_PER_MOVE:
            raise InvalidMoveError(
                f'Invalid move: must remove between {MIN_OBJECTS_PER_MOVE} and {MAX_OBJECTS_PER_MOVE} objects'
            )
        if num_objects > self.state['remainingObjects']:
            raise InvalidMoveError(
                f"Invalid move: only {self.state['remainingObjects']} objects remain"
            )
        return num_objects

    def apply_move(self, player_id: str, num_objects: Any) -> None:
        count = self.validate_move(player_id, num_objects)
        self.state['moves'].append({
            'playerID': player_id,
            'gameID': self.game_id,
            'move': {'numObjects': count},
        })
        self.state['remainingObjects'] -= count
        if self.state['remainingObjects'] == 0:
            self.state['status'] = OVER
            self.state['winners'] = [self._other_player(player_id)]
