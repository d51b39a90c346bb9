import random

import pytest

from holdem.models import ActionType, Phase, PlayerState
from holdem.strategy import PassiveStrategy
from table.config import TableConfig
from table.session import AI_NAMES, HUMAN_ID, TableError, TableSession, build_players


def make_session(stacks=None, **overrides):
    config = TableConfig(opponents=2, seed=7, **overrides)
    players = None
    if stacks is not None:
        players = [PlayerState(id=HUMAN_ID, name="You", chips=stacks[0])]
        players += [
            PlayerState(id=f"ai-{idx}", name=AI_NAMES[idx], chips=chips, is_ai=True)
            for idx, chips in enumerate(stacks[1:])
        ]
    return TableSession(config, rng=random.Random(7), strategy=PassiveStrategy(), players=players)


def play_hand(session):
    """Human folds when due; passive AI seats play the rest."""
    session.start_hand()
    while not session.state.is_over:
        if session.state.current_player.is_ai:
            session.play_ai_turn()
        else:
            session.timeout_fold()
    return session.finish_hand()


def test_build_players_seats_human_first():
    config = TableConfig(opponents=3)
    players = build_players(config, "Alice", random.Random(1))
    assert [player.id for player in players] == [HUMAN_ID, "ai-0", "ai-1", "ai-2"]
    assert players[0].name == "Alice"
    assert not players[0].is_ai
    assert all(player.is_ai and player.name in AI_NAMES for player in players[1:])
    assert len({player.name for player in players[1:]}) == 3
    assert all(player.chips == config.starting_chips for player in players)


def test_config_rejects_bad_values():
    with pytest.raises(ValueError):
        TableConfig(opponents=0)
    with pytest.raises(ValueError):
        TableConfig(opponents=9)
    with pytest.raises(ValueError):
        TableConfig(small_blind=20, big_blind=10)
    with pytest.raises(ValueError):
        TableConfig(starting_chips=10)


def test_dealer_button_rotates_each_hand():
    session = make_session()
    dealers = []
    for _ in range(4):
        play_hand(session)
        dealers.append(session.state.dealer_index)
    assert dealers == [0, 1, 2, 0]
    assert session.hand_number == 4


def test_actions_are_validated_against_the_current_turn():
    session = make_session()
    with pytest.raises(TableError) as exc:
        session.act(HUMAN_ID, ActionType.FOLD)
    assert exc.value.code == "NO_HAND"

    state = session.start_hand()
    assert state.current_player.id == HUMAN_ID

    with pytest.raises(TableError) as exc:
        session.act("ai-0", ActionType.CALL)
    assert exc.value.code == "OUT_OF_TURN"
    with pytest.raises(TableError) as exc:
        session.act(HUMAN_ID, ActionType.CHECK)
    assert exc.value.code == "ILLEGAL_ACTION"
    with pytest.raises(TableError) as exc:
        session.play_ai_turn()
    assert exc.value.code == "OUT_OF_TURN"

    session.act(HUMAN_ID, ActionType.CALL)
    assert session.history[-1] == "You called $20"


def test_timeout_folds_the_human_and_ai_finish_the_hand():
    session = make_session()
    session.start_hand()
    session.timeout_fold()
    assert session.state.players[0].is_folded
    assert session.history[-1] == "You folded"

    state = session.run_ai_turns()
    assert state.is_over
    with pytest.raises(TableError) as exc:
        session.timeout_fold()
    assert exc.value.code == "OUT_OF_TURN"


def test_run_ai_turns_stops_when_the_human_is_due():
    session = make_session()
    session.start_hand()
    session.act(HUMAN_ID, ActionType.CALL)
    state = session.run_ai_turns()
    assert state.phase == Phase.FLOP
    assert state.current_player.id == HUMAN_ID
    assert state.players[1].last_action == ActionType.CHECK


def test_finish_hand_credits_winnings_and_conserves_chips():
    session = make_session()
    session.start_hand()
    assert session.total_chips() == 3_000

    with pytest.raises(TableError) as exc:
        session.finish_hand()
    assert exc.value.code == "HAND_IN_PROGRESS"
    with pytest.raises(RuntimeError):
        session.start_hand()

    session.timeout_fold()
    session.run_ai_turns()
    winnings = session.finish_hand()
    assert sum(winnings.values()) == session.state.pot
    assert session.total_chips() == 3_000
    assert session.human.chips == 1_000
    assert session.finish_hand() == {}


def test_history_keeps_last_five_actions():
    session = make_session()
    for _ in range(3):
        play_hand(session)
    assert 0 < len(session.history) <= 5
    assert session.history.maxlen == 5


def test_busted_human_must_rebuy():
    session = make_session(stacks=[0, 1_000, 1_000])
    assert session.needs_rebuy
    with pytest.raises(TableError) as exc:
        session.start_hand()
    assert exc.value.code == "REBUY_REQUIRED"

    for player_id, code in (("ai-0", "NOT_HUMAN"), ("ghost", "UNKNOWN_PLAYER")):
        with pytest.raises(TableError) as exc:
            session.rebuy(player_id)
        assert exc.value.code == code

    assert session.rebuy(HUMAN_ID).chips == 1_000
    assert not session.needs_rebuy
    with pytest.raises(TableError) as exc:
        session.rebuy(HUMAN_ID)
    assert exc.value.code == "HAS_CHIPS"

    session.start_hand()
    with pytest.raises(TableError) as exc:
        session.rebuy(HUMAN_ID)
    assert exc.value.code == "HAND_IN_PROGRESS"


def test_busted_ai_seats_leave_the_table():
    session = make_session(stacks=[1_000, 0, 500])
    state = session.start_hand()
    assert [player.id for player in state.players] == [HUMAN_ID, "ai-1"]
    assert session.total_chips() == 1_500


def test_ai_seats_are_restocked_when_human_would_sit_alone():
    session = make_session(stacks=[1_000, 0, 0])
    state = session.start_hand()
    assert [player.id for player in state.players] == [HUMAN_ID, "ai-0", "ai-1"]
    assert session.total_chips() == 3_000


def test_rejected_raise_amount_raises_and_keeps_history():
    session = make_session()
    session.start_hand()
    session.act(HUMAN_ID, ActionType.CALL)
    session.run_ai_turns()
    state = session.state
    history = list(session.history)

    for amount in (0, -5, 10.5):
        with pytest.raises(TableError) as exc:
            session.act(HUMAN_ID, ActionType.RAISE, amount)
        assert exc.value.code == "ILLEGAL_ACTION"
    assert session.state is state
    assert list(session.history) == history

    session.act(HUMAN_ID, ActionType.RAISE, 60)
    assert session.history[-1] == "You raised to $60"
