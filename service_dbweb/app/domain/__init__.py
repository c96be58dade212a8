from .stats_gate import GateState, StatsGate, extract_bearer

__all__ = ["GateState", "StatsGate", "extract_bearer"]
