"""
core/session — client-side session state machine.

One explicit ``SessionState`` plus a pure ``transition(state, event)``
returning the next state and a tuple of effects. The controller in
``client/controller.py`` runs the effects and feeds their outcomes back
in as events.

Public API:
    State:        SessionState
    Transition:   transition, Transition
    Events:       see core.session.events
"""

from core.session.state import SessionState
from core.session.transitions import Transition, transition

__all__ = ["SessionState", "Transition", "transition"]
