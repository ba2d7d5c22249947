import json
from pathlib import Path

import pytest

from oruspad.__main__ import main
from oruspad.share import encode_source

EXAMPLES_DIR = Path(__file__).parent.parent / 'examples'


def test_runs_program_file(capsys):
    main([str(EXAMPLES_DIR / 'program_2.orus')])
    assert capsys.readouterr().out == '0\n1\n2\n'


def test_debug_mode(capsys):
    main(['--mode', 'debug', str(EXAMPLES_DIR / 'program_7.orus')])
    out = capsys.readouterr().out
    assert '--- Debug Information ---' in out
    assert '"name": "Orus"' in out


def test_error_exits_with_status_1(capsys):
    with pytest.raises(SystemExit) as exc:
        main([str(EXAMPLES_DIR / 'program_5.orus')])
    assert exc.value.code == 1
    assert capsys.readouterr().out.startswith('Error: IndexError: index 5 out of range for length 3')


def test_iteration_flag(capsys):
    with pytest.raises(SystemExit):
        main(['--max-iterations', '3', str(EXAMPLES_DIR / 'program_6.orus')])
    assert capsys.readouterr().out.strip() == \
        'Error: ResourceExhausted: program exceeded its loop iteration budget'


def test_missing_file(capsys, tmp_path):
    with pytest.raises(SystemExit):
        main([str(tmp_path / 'nope.orus')])
    assert 'not found' in capsys.readouterr().err


def test_emit_and_run_ast(capsys, tmp_path):
    program = tmp_path / 'hello.orus'
    program.write_text((EXAMPLES_DIR / 'program_1.orus').read_text(encoding='utf-8'), encoding='utf-8')
    main(['--emit-ast', str(program)])
    ast_path = Path(capsys.readouterr().out.strip())
    assert ast_path.name == 'hello.orus.ast.json'
    assert json.loads(ast_path.read_text(encoding='utf-8'))['type'] == 'Program'
    main(['--ast', str(ast_path)])
    assert capsys.readouterr().out.splitlines()[0] == 'Hello from OrusPad!'


def test_example_flag(capsys):
    main(['--example', 'hello-world'])
    assert capsys.readouterr().out == 'Hello, World!\n'


def test_highlight_flag(capsys):
    main(['--highlight', str(EXAMPLES_DIR / 'program_2.orus')])
    first = capsys.readouterr().out.splitlines()[0]
    assert first == "comment\t'// Ranges include both ends'"


def test_share_and_unshare(capsys):
    path = EXAMPLES_DIR / 'program_3.orus'
    main(['--share', str(path)])
    token = capsys.readouterr().out.strip()
    assert token == encode_source(path.read_text(encoding='utf-8'))
    main(['--unshare', token])
    assert capsys.readouterr().out == path.read_text(encoding='utf-8') + '\n'


def test_unshare_rejects_garbage(capsys):
    with pytest.raises(SystemExit):
        main(['--unshare', '!!!'])
    assert 'malformed share token' in capsys.readouterr().err


def test_verbose_writes_debug_log(capsys, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    main(['-vv', str(EXAMPLES_DIR / 'program_4.orus')])
    assert capsys.readouterr().out == 'inner 2\nouter 1\nHi!\n'
    log = (tmp_path / 'debug.txt').read_text(encoding='utf-8')
    assert 'declare greeting: Text = Hi' in log
    assert 'run finished' in log
