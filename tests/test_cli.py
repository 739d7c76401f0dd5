import io
import json
import sys

from treelox.__main__ import main


def write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding='utf-8')
    return path


def test_run_script(tmp_path, capsys):
    script = write(tmp_path, 'ok.lox', 'var a = 2;\nprint a * 21;\n')
    assert main([str(script)]) == 0
    assert capsys.readouterr().out == '42\n'


def test_parse_error_exit_status(tmp_path, capsys):
    script = write(tmp_path, 'bad.lox', 'print ;\nprint 1;\n')
    assert main(['--no-color', str(script)]) == 65
    captured = capsys.readouterr()
    assert captured.out == '1\n'
    assert captured.err.startswith("Parse error: [line 1] Error at ';': Expect expression.")


def test_runtime_error_exit_status(tmp_path, capsys):
    script = write(tmp_path, 'boom.lox', 'print 1 / 0;\n')
    assert main(['--no-color', str(script)]) == 70
    assert capsys.readouterr().err.startswith('Runtime error: [line 1] DivisionByZero: Division by zero.')


def test_missing_script(tmp_path, capsys):
    assert main([str(tmp_path / 'nope.lox')]) == 66
    assert 'cannot read' in capsys.readouterr().err


def test_eval_expression(capsys):
    assert main(['-e', '1 + 2 * 3']) == 0
    assert capsys.readouterr().out == '7\n'


def test_eval_expression_errors(capsys):
    assert main(['-e', '1 +']) == 65
    assert main(['-e', '"a" * 2']) == 70
    assert capsys.readouterr().out == ''


def test_emit_and_run_ast(tmp_path, capsys):
    script = write(tmp_path, 'prog.lox', 'var i = 0;\nwhile (i < 2) { print i; i = i + 1; }\n')
    assert main(['--emit-ast', str(script)]) == 0
    ast_path = tmp_path / 'prog.lox.ast.json'
    assert capsys.readouterr().out.strip() == str(ast_path)
    assert json.loads(ast_path.read_text(encoding='utf-8'))['type'] == 'Program'

    assert main(['--ast', str(ast_path)]) == 0
    assert capsys.readouterr().out == '0\n1\n'


def test_emit_ast_refuses_broken_script(tmp_path, capsys):
    script = write(tmp_path, 'broken.lox', 'var = 1;\n')
    assert main(['--emit-ast', str(script)]) == 65
    assert not (tmp_path / 'broken.lox.ast.json').exists()


def test_invalid_ast_file(tmp_path, capsys):
    path = write(tmp_path, 'bad.ast.json', '{"type": "Mystery"}')
    assert main(['--ast', str(path)]) == 65
    assert 'not a valid AST file' in capsys.readouterr().err


def test_verbose_run_writes_debug_file(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    script = write(tmp_path, 'v.lox', 'var a = 1;\n')
    assert main(['-vv', str(script)]) == 0
    assert 'declare a: Number = 1' in (tmp_path / 'debug.txt').read_text(encoding='utf-8')


def test_no_script_starts_shell(monkeypatch, capsys):
    monkeypatch.setattr('sys.stdin', io.StringIO('var a = 5;\nprint a;\nexit\n'))
    assert main([]) == 0
    out = capsys.readouterr().out
    assert 'treelox interpreter' in out
    assert '5\n' in out


def test_too_deep_script_is_reported_not_crashed(tmp_path, capsys):
    deep_sum = ' + '.join(['1'] * sys.getrecursionlimit())
    script = write(tmp_path, 'deep.lox', f'print {deep_sum};\nprint "ok";\n')
    assert main(['--no-color', str(script)]) == 70
    captured = capsys.readouterr()
    assert captured.out == 'ok\n'
    assert 'NestingTooDeep: Too much nesting.' in captured.err

    assert main(['--emit-ast', str(script)]) == 65
    assert 'nests too deeply' in capsys.readouterr().err
    assert not (tmp_path / 'deep.lox.ast.json').exists()
