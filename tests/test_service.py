import io
import itertools
import pytest
from tallgrass.core.errors import NotFoundError, RejectReason, StateError, TallgrassError
from tallgrass.core.logging import logger
from tallgrass.battle.ai import ActionKind, AIActionDecision, BattleAI
from tallgrass.battle.models import BattleKind, BattleStatus, Phase, Side, Winner
from tallgrass.battle.results import Result
from tallgrass.battle.service import BattleService
from tallgrass import cli
from tallgrass.system.settings import SettingsData


def snapshot(cid, name, hp=50, attack=50, defense=40, types=('normal',), moves=None):
    return {
        'id': cid, 'species_id': 1, 'name': name, 'level': 10, 'max_hp': 50, 'current_hp': hp,
        'attack': attack, 'defense': defense, 'types': list(types),
        'moves': moves if moves is not None else [
            {'id': 1, 'name': 'Tackle', 'category': 'normal', 'power': 40, 'accuracy': 100, 'max_pp': 35},
        ],
    }


def make_service(**settings):
    counter = itertools.count(1)
    return BattleService(SettingsData(**settings), id_factory=lambda: f"battle-{next(counter)}")


def start(service, **kw):
    res = service.start_battle(snapshot('me', 'Turtwig'), snapshot('foe', 'Starly', **kw), 'wild', seed=7)
    assert res.ok
    return res.value.session_id


def test_start_battle_logs_wild_encounter():
    service = make_service()
    res = service.start_battle(snapshot('me', 'Turtwig'), snapshot('foe', 'Starly'), BattleKind.WILD)
    assert res.ok
    out = res.value
    assert out.session_id == 'battle-1'
    assert out.phase is Phase.COMMAND_SELECTION and out.turn == 1
    assert out.entry.message == 'A wild Starly appeared!'


def test_default_ids_are_unique():
    service = BattleService()
    a = service.start_battle(snapshot('me', 'A'), snapshot('foe', 'B')).unwrap().session_id
    b = service.start_battle(snapshot('me', 'A'), snapshot('foe', 'B')).unwrap().session_id
    assert a.startswith('battle-') and a != b


@pytest.mark.parametrize('bad', [
    snapshot('foe', 'Starly', hp=0),
    {'id': 'foe', 'name': 'Starly'},
    snapshot('foe', 'Starly', types=('fairy',)),
])
def test_start_battle_rejects_bad_snapshots(bad):
    res = make_service().start_battle(snapshot('me', 'Turtwig'), bad)
    assert not res.ok
    assert res.error.reason is RejectReason.VALIDATION_FAILED


def test_start_battle_rejects_unknown_kind():
    res = make_service().start_battle(snapshot('me', 'Turtwig'), snapshot('foe', 'Starly'), 'ranked')
    assert res.error.reason is RejectReason.VALIDATION_FAILED


def test_use_move_until_win():
    service = make_service()
    sid = start(service, hp=1)
    res = service.use_move(sid, 'me', 1, 'opponent')
    assert res.ok
    out = res.value
    assert out.winner is Winner.SELF and out.status is BattleStatus.ENDED
    assert out.opponent_hp == 0 and out.experience_gained == 100
    again = service.use_move(sid, 'me', 1)
    assert again.error.reason is RejectReason.SESSION_ENDED


def test_rejections_do_not_mutate_status():
    service = make_service()
    sid = start(service)
    before = service.query_status(sid).value
    for args, reason in [
        (('nope', 'me', 1), RejectReason.SESSION_NOT_FOUND),
        ((sid, 'me', 42), RejectReason.MOVE_NOT_FOUND),
        ((sid, 'ghost', 1), RejectReason.COMBATANT_NOT_FOUND),
        ((sid, 'me', 1, 'self'), RejectReason.VALIDATION_FAILED),
        ((sid, 'me', 1, 'sideways'), RejectReason.VALIDATION_FAILED),
    ]:
        res = service.use_move(*args)
        assert not res.ok and res.error.reason is reason
    assert service.query_status(sid).value == before


def test_pp_exhausted_rejection():
    service = make_service()
    moves = [{'id': 1, 'name': 'Tackle', 'category': 'normal', 'power': 40, 'max_pp': 35, 'current_pp': 0}]
    sid = service.start_battle(snapshot('me', 'Turtwig', moves=moves), snapshot('foe', 'Starly')).unwrap().session_id
    res = service.use_move(sid, 'me', 1)
    assert res.error.reason is RejectReason.PP_EXHAUSTED
    assert res.error.category.value == 'resource'


def test_query_status_is_idempotent_and_limited():
    service = make_service(recent_log_limit=3)
    sid = start(service, hp=50, defense=400)
    for _ in range(4):
        assert service.use_move(sid, 'me', 1).ok
    first = service.query_status(sid).unwrap()
    second = service.query_status(sid).unwrap()
    assert first == second
    assert len(first.recent_log) == 3
    assert first.turn == 5 and first.status is BattleStatus.ACTIVE
    assert first.stats.moves_used == 4


def test_end_battle_with_reason():
    service = make_service()
    sid = start(service)
    res = service.end_battle(sid, 'player ran away')
    assert res.ok and res.value.winner is None and res.value.reason == 'player ran away'
    report = service.query_status(sid).unwrap()
    assert report.status is BattleStatus.ENDED and report.phase is Phase.ENDED
    assert 'player ran away' in report.recent_log[-1].message
    assert service.end_battle(sid).error.reason is RejectReason.SESSION_ENDED


def test_opponent_turn_resolves_a_move():
    service = make_service()
    sid = start(service)
    res = service.opponent_turn(sid)
    assert res.ok
    turn = res.value
    assert turn.decision.kind is ActionKind.USE_MOVE
    assert turn.move is not None and turn.move.side is Side.OPPONENT
    assert service.query_status(sid).value.self_hp < 50


def test_opponent_without_pp_flees():
    service = make_service()
    moves = [{'id': 9, 'name': 'Peck', 'category': 'flying', 'power': 35, 'max_pp': 35, 'current_pp': 0}]
    sid = start(service, moves=moves)
    turn = service.opponent_turn(sid).unwrap()
    assert turn.decision.kind is ActionKind.FLEE and turn.ended is not None
    report = service.query_status(sid).unwrap()
    assert report.status is BattleStatus.ENDED and report.winner is None
    assert 'fled' in report.recent_log[-1].message


def test_switch_not_supported():
    service = make_service()
    sid = start(service)
    res = service.switch(sid, 'me')
    assert res.error.reason is RejectReason.NOT_SUPPORTED


def test_unwrap_raises_mapped_errors():
    service = make_service()
    with pytest.raises(StateError):
        service.query_status('missing').unwrap()
    sid = start(service)
    with pytest.raises(NotFoundError):
        service.use_move(sid, 'me', 77).unwrap()


def test_same_seed_same_battle():
    def play():
        service = make_service()
        sid = service.start_battle(snapshot('me', 'Turtwig', defense=400), snapshot('foe', 'Starly', defense=400),
                                   seed=11).unwrap().session_id
        return [service.ai_turn(sid, side).unwrap().move.damage for side in (Side.SELF, Side.OPPONENT) * 2]
    assert play() == play()


def test_discard_only_ended_sessions():
    service = make_service()
    sid = start(service)
    assert not service.discard(sid)
    service.end_battle(sid)
    assert service.discard(sid)
    assert service.query_status(sid).error.reason is RejectReason.SESSION_NOT_FOUND


def test_start_battle_with_sample_combatants_logs_player(monkeypatch):
    stream = io.StringIO()
    monkeypatch.setattr(logger, 'stream', stream)
    monkeypatch.setattr(logger, 'threshold', 20)
    service = make_service()
    res = service.start_battle(cli.SAMPLE_SELF, cli.SAMPLE_OPPONENT, 'wild', seed=1)
    assert res.ok
    assert service.query_status(res.value.session_id).ok
    line = stream.getvalue()
    assert 'BattleStart' in line and 'player=Pikachu' in line and 'opponent=Piplup' in line


def test_ai_attack_without_move_is_rejected(monkeypatch):
    service = make_service()
    sid = start(service)
    broken = AIActionDecision(ActionKind.USE_MOVE, None, 0.5, 0.5, "no move")
    monkeypatch.setattr(BattleAI, 'decide_action', lambda self, *a, **kw: broken)
    res = service.opponent_turn(sid)
    assert not res.ok
    assert res.error.reason is RejectReason.VALIDATION_FAILED
    assert service.query_status(sid).value.turn == 1


def test_unwrap_failed_result_without_rejection():
    with pytest.raises(TallgrassError):
        Result(ok=False).unwrap()
