"""Media player control: command channel, process lookup and watchdog."""

from player.channel import CommandChannel, ConnectResult, probe_endpoint
from player.inspector import PsutilProcessInspector, player_process_name
from player.supervisor import PlayerSupervisor, SupervisorAction, build_player_args

__all__ = [
    "CommandChannel",
    "ConnectResult",
    "PlayerSupervisor",
    "PsutilProcessInspector",
    "SupervisorAction",
    "build_player_args",
    "player_process_name",
    "probe_endpoint",
]
