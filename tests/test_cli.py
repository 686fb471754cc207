"""CLI-level smoke tests."""
from homegame.cli import _cmd_eval_hand, _cmd_melds, build_parser, main


class _Args:
    def __init__(self, **kwargs):
        self.__dict__.update(kwargs)


def test_cli_melds(capsys):
    _cmd_melds(_Args(cards="As 2s 3s Kh Qd Jc 5d 5h 5c 9s".split()))
    out = capsys.readouterr().out
    assert "Run: A♠ 2♠ 3♠" in out
    assert "(39)" in out


def test_cli_eval_hand_round(capsys):
    _cmd_eval_hand(_Args(cards="7s 7h Ah Ad Ac 2s 9d".split(), wild=None, round=3))
    out = capsys.readouterr().out
    assert "(7s wild)" in out
    assert "Five of a Kind, As" in out


def test_cli_eval_hand_no_wild(capsys):
    main(["eval-hand", "Ks", "Kh", "9d", "7c", "2s"])
    out = capsys.readouterr().out
    assert "Pair of Ks" in out
    assert "wild" not in out


def test_cli_gin_sim(capsys):
    main(["gin-sim", "--hands", "2", "--seed", "1", "--mode", "quick"])
    out = capsys.readouterr().out
    assert out.startswith("hands=2 ")


def test_cli_scc_sim(capsys):
    main(["scc-sim", "--turns", "50", "--seed", "3"])
    out = capsys.readouterr().out
    assert "turns=50" in out
    assert "qualified=" in out


def test_cli_verbose_flag_parses():
    args = build_parser().parse_args(["--verbose", "melds", "As", "2s", "3s"])
    assert args.verbose
    assert args.command == "melds"
