from rich.console import Console
from tallgrass import cli
from tallgrass.battle.render import hp_bar, hp_color, print_status, stats_table
from tallgrass.battle.service import BattleService
from tallgrass.battle.session import BattleStats


def recording_console():
    return Console(record=True, width=100, color_system=None)


def test_hp_colors_follow_fraction():
    assert hp_color(50, 50) == 'green'
    assert hp_color(20, 50) == 'yellow'
    assert hp_color(5, 50) == 'red'
    assert hp_bar(10, 20, width=10).plain == '[█████░░░░░] 10/20'


def test_status_panel_lists_combatants_and_log():
    service = BattleService()
    sid = service.start_battle(cli.SAMPLE_SELF, cli.SAMPLE_OPPONENT).unwrap().session_id
    out = recording_console()
    print_status(service.query_status(sid).unwrap(), out)
    text = out.export_text()
    assert 'Pikachu' in text and 'Piplup' in text
    assert 'A wild Piplup appeared!' in text
    assert 'ELE' in text and 'WTR' in text


def test_stats_table_rows():
    out = recording_console()
    out.print(stats_table(BattleStats(turns=3, damage_dealt=40)))
    text = out.export_text()
    assert 'damage dealt' in text and '40' in text


def test_cli_chart(tmp_path):
    out = recording_console()
    code = cli.main(['--settings', str(tmp_path / 's.json'), 'chart', 'electric', 'water', 'flying'], out=out)
    assert code == 0
    text = out.export_text()
    assert 'x4 (super)' in text
    assert "It's super effective!" in text


def test_cli_chart_unknown_type(tmp_path):
    out = recording_console()
    assert cli.main(['--settings', str(tmp_path / 's.json'), 'chart', 'laser', 'water'], out=out) == 2


def test_cli_simulate_finishes(tmp_path):
    out = recording_console()
    code = cli.main(['--settings', str(tmp_path / 's.json'), 'simulate', '--seed', '3',
                     '--difficulty', 'champion', '--opponent-difficulty', 'novice'], out=out)
    assert code == 0
    text = out.export_text()
    assert 'A wild Piplup appeared!' in text
    assert 'Result:' in text and 'Battle statistics' in text
