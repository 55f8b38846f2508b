from pathlib import Path

from aoclang.__main__ import run, run_tests
from aoclang.interpreter import load_file

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_sonar_sweep(capsys):
    evaluator = load_file(str(EXAMPLES / 'sonar_sweep.aoc'))
    assert run_tests(evaluator, bench=False)
    run(evaluator, bench=False)
    out = capsys.readouterr().out.strip().splitlines()
    assert out[-2:] == ['part1: 3', 'part2: 3']


def test_dive(capsys):
    evaluator = load_file(str(EXAMPLES / 'dive.aoc'))
    assert run_tests(evaluator, bench=False)
    run(evaluator, bench=False)
    out = capsys.readouterr().out.strip().splitlines()
    assert out[-2:] == ['part1: 15', 'part2: 60']


def test_word_count(capsys):
    evaluator = load_file(str(EXAMPLES / 'word_count.aoc'))
    assert run_tests(evaluator, bench=False)
    run(evaluator, bench=False)
    out = capsys.readouterr().out.strip().splitlines()
    assert out[-2:] == ["part1: 'x=2 y=1'", 'part2: 143']
