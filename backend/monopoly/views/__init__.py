from monopoly.views.game_handlers import (
    delete_game as delete_game,
)
from monopoly.views.game_handlers import (
    read_game as read_game,
)
from monopoly.views.game_handlers import (
    read_games as read_games,
)
from monopoly.views.player_handlers import (
    create_player as create_player,
)
from monopoly.views.player_handlers import (
    delete_player as delete_player,
)
from monopoly.views.player_handlers import (
    read_player as read_player,
)
from monopoly.views.player_handlers import (
    read_players as read_players,
)
from monopoly.views.player_handlers import (
    update_player as update_player,
)
from monopoly.views.responses import return_data_or_404 as return_data_or_404
